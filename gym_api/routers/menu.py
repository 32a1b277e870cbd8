
from fastapi import APIRouter

from gym_api.core.exceptions import NotFoundError
from gym_api.core.menus import ROLE_MENUS, menu_for_role

router = APIRouter(prefix="/menu", tags=["menu"])


@router.get("/{role}")
def get_menu(role: str):
    """Navigation entries for a dashboard role."""
    menu = menu_for_role(role, ROLE_MENUS)
    if menu is None:
        raise NotFoundError("Menu for role", role)
    return menu
