"""
Navigation menus per role.

The dashboard asks for its menu by role; nothing here reads ambient state.
"""
from typing import Dict, List, Optional, TypedDict


class MenuItem(TypedDict, total=False):
    name: str
    path: str
    children: List["MenuItem"]


def _item(name: str, path: Optional[str] = None, children: Optional[List[MenuItem]] = None) -> MenuItem:
    item: MenuItem = {"name": name}
    if path:
        item["path"] = path
    if children:
        item["children"] = children
    return item


ROLE_MENUS: Dict[str, List[MenuItem]] = {
    "superadmin": [
        _item("Dashboard", "/superadmin/dashboard"),
        _item("Branches", "/superadmin/branches"),
        _item("People", children=[
            _item("Staff", "/superadmin/people/staff"),
            _item("Members", "/superadmin/people/members"),
        ]),
        _item("Plans", "/superadmin/plans"),
        _item("Salaries", "/superadmin/salaries"),
        _item("Settings", children=[
            _item("Role Management", "/superadmin/settings/roles"),
            _item("Branch Management", "/superadmin/settings/branches"),
        ]),
    ],
    "admin": [
        _item("Dashboard", "/admin/admin-dashboard"),
        _item("Create Plan", "/admin/createplan"),
        _item("Classes Schedule", "/admin/classesSchedule"),
        _item("Session Bookings", "/admin/bookings"),
        _item("Members", children=[
            _item("Manage Members", "/admin/members/manage-members"),
        ]),
        _item("Staff", children=[
            _item("Manage Staff", "/admin/staff/manage-staff"),
            _item("Duty Roster", "/admin/staff/duty-roster"),
            _item("Salary Calculator", "/admin/staff/salary-calculator"),
        ]),
        _item("Personal Training Details", "/admin/booking/personal-training"),
    ],
    "manager": [
        _item("Dashboard", "/manager/dashboard"),
        _item("Duty Roster", "/manager/duty-roster"),
        _item("Booking Requests", "/manager/bookings"),
    ],
    "personaltrainer": [
        _item("Dashboard", "/personaltrainer/dashboard"),
        _item("Session Bookings", "/personaltrainer/bookings"),
        _item("Attendance", "/personaltrainer/attendance"),
    ],
    "generaltrainer": [
        _item("Dashboard", "/generaltrainer/dashboard"),
        _item("Group Plans & Bookings", "/generaltrainer/groupplansbookings"),
        _item("Daily Schedule", "/generaltrainer/daily-schedule"),
    ],
    "receptionist": [
        _item("Dashboard", "/receptionist/dashboard"),
        _item("Walk-in Registration", "/receptionist/walk-in-registration"),
        _item("Book Session", "/receptionist/book-session"),
    ],
    "housekeeping": [
        _item("Dashboard", "/housekeeping/dashboard"),
        _item("Duty Roster", "/housekeeping/duty-roster"),
        _item("Task Checklist", "/housekeeping/task-checklist"),
    ],
    "member": [
        _item("Dashboard", "/member/dashboard"),
        _item("View Plans", "/member/view-plans"),
        _item("Class Schedule", "/member/classschedule"),
        _item("Account", "/member/account"),
    ],
}


def menu_for_role(role: str, menus: Optional[Dict[str, List[MenuItem]]] = None) -> Optional[List[MenuItem]]:
    """Look up the menu for `role` in `menus` (defaults to ROLE_MENUS)."""
    table = ROLE_MENUS if menus is None else menus
    return table.get(role.lower())
