# socialgraph/models/__init__.py
# Import every model so Base.metadata knows all tables

from socialgraph.models.profile import Profile
from socialgraph.models.friendship import Friendship
from socialgraph.models.notification import Notification
from socialgraph.models.verification import PhoneVerification

__all__ = ["Profile", "Friendship", "Notification", "PhoneVerification"]
