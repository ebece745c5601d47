"""Holiday house booking backend."""
