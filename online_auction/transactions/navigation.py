from .models import Nav
from .security import authenticate
from . import services


async def load_nav(user_id):
    # Fetched fresh for every request
    users = await services.user_service().get_users(headers=authenticate(user_id))
    return Nav(users=users, current_user=user_id)
