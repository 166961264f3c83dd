import logging
from typing import Dict, Iterable

from .models import User

logger = logging.getLogger(__name__)


def missing_profile(user_id: str) -> Dict:
    """Placeholder profile for an id with no User record."""
    return {'id': user_id, 'username': None, 'email': None}


def get_public_profiles(user_ids: Iterable[str]) -> Dict[str, Dict]:
    """
    Resolve public profile fields for a set of user ids in one query.

    Ids without a User record map to a placeholder with null fields; callers
    keep working with dangling references instead of failing.
    """
    ids = {str(user_id) for user_id in user_ids if user_id}
    if not ids:
        return {}

    profiles = {
        user.user_id: user.public_profile()
        for user in User.objects.filter(user_id__in=ids).only('user_id', 'user_name', 'email')
    }
    for user_id in ids - profiles.keys():
        logger.debug("No user record for id %s", user_id)
        profiles[user_id] = missing_profile(user_id)
    return profiles
