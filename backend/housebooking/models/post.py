from sqlalchemy import Column, Integer, String, Text, ForeignKey

from housebooking.db.base import Base, TimestampMixin


class Post(Base, TimestampMixin):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    author_name = Column(String(255), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title={self.title})>"
