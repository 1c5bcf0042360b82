from taskboard.errors import NotFoundError
from taskboard.storage import UserStore

PROFILE_FIELDS = ("name", "bio")


def get_profile(store: UserStore, user_id: str) -> dict:
    user = store.get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(store: UserStore, user_id: str, fields: dict) -> dict:
    user = get_profile(store, user_id)
    for key in PROFILE_FIELDS:
        if fields.get(key) is not None:
            user[key] = fields[key]
    return store.save(user)
