from housebooking.models.user import User
from housebooking.models.property import Property
from housebooking.models.booking import Booking
from housebooking.models.invitation_code import InvitationCode
from housebooking.models.post import Post

__all__ = ["User", "Property", "Booking", "InvitationCode", "Post"]
