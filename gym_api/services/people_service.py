"""
Branches and user accounts (members and staff logins).
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from gym_api.core.exceptions import ConflictError, ValidationError
from gym_api.models.branch import Branch
from gym_api.models.user import User, UserRole
from gym_api.services.base import BaseService
from gym_api.services.repository import Repository


class BranchService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.branches = Repository(db, Branch, "Branch")

    def list(self) -> List[Branch]:
        return self.branches.find_many()

    def get(self, branch_id: int) -> Branch:
        return self.branches.find_by_id(branch_id)

    def create(self, data: Dict[str, Any]) -> Branch:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Branch name is required")
        if self.db.query(Branch).filter(Branch.name == name).first():
            raise ConflictError(f"Branch '{name}' already exists")
        branch = self.branches.create({**data, "name": name})
        self.log_info(f"Branch {branch.id} created")
        return branch


class UserService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.users = Repository(db, User, "User")
        self.branches = Repository(db, Branch, "Branch")

    def list(
        self,
        role: Optional[UserRole] = None,
        branch_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[User]:
        filters = []
        if role:
            filters.append(User.role == role)
        if branch_id:
            filters.append(User.branch_id == branch_id)
        if search:
            pattern = f"%{search.strip()}%"
            filters.append(or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.email.ilike(pattern),
            ))
        return self.users.find_many(filters)

    def get(self, user_id: int) -> User:
        return self.users.find_by_id(user_id)

    def create(self, data: Dict[str, Any]) -> User:
        email = (data.get("email") or "").strip().lower()
        if not email or not (data.get("first_name") or "").strip():
            raise ValidationError("First name and email are required")
        if self.db.query(User).filter(User.email == email).first():
            raise ConflictError(f"A user with email {email} already exists")
        if data.get("branch_id"):
            self.branches.find_by_id(data["branch_id"])
        user = self.users.create({**data, "email": email})
        self.log_info(f"User {user.id} created", role=user.role.value)
        return user
