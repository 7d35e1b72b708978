from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_
from typing import Optional, List, Tuple
from tour_booking.models.user import User, Role, UserRole
from tour_booking.utils.helpers import utcnow
from tour_booking.utils.security import hash_password


class UserRepository:
    """Repository for users, roles and role assignments"""

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self, include_deleted: bool = False):
        query = self.db.query(User).options(joinedload(User.default_role))
        if not include_deleted:
            query = query.filter(or_(User.is_delete.is_(False), User.is_delete.is_(None)))
        return query

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get non-deleted user by ID"""
        return self._base_query().filter(User.id == user_id).first()

    def get_by_username(self, username: str) -> Optional[User]:
        return self._base_query().filter(User.username == username).first()

    def exists(self, user_id: int) -> bool:
        return self.db.query(User.id).filter(User.id == user_id).first() is not None

    def username_taken(self, username: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(User.id).filter(User.username == username)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(User.id).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def get_all(
        self,
        skip: int = 0,
        limit: int = 10,
        include_deleted: bool = False,
    ) -> Tuple[List[User], int]:
        query = self._base_query(include_deleted=include_deleted)
        total = query.count()
        users = query.order_by(User.id).offset(skip).limit(limit).all()
        return users, total

    def search(
        self,
        keyword: Optional[str] = None,
        role_id: Optional[int] = None,
        is_active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[User], int]:
        """Search users by keyword (username, name, email, phone), role and active flag"""
        query = self._base_query()

        if keyword:
            search_term = f"%{keyword}%"
            query = query.filter(
                User.username.ilike(search_term) |
                User.full_name.ilike(search_term) |
                User.email.ilike(search_term) |
                User.phone.ilike(search_term)
            )

        if role_id is not None:
            query = query.filter(User.default_role_id == role_id)

        if is_active is not None:
            query = query.filter(User.is_active.is_(is_active))

        total = query.count()
        users = query.order_by(User.id).offset(skip).limit(limit).all()
        return users, total

    def create(self, password: str, **fields) -> User:
        """Create a new active user; the password is stored hashed"""
        user = User(
            **fields,
            password_hash=hash_password(password),
            created_date=utcnow(),
            is_active=True,
            is_delete=False,
        )
        self.db.add(user)
        self.db.commit()
        return self.get_by_id(user.id)

    def update(self, user: User, password: Optional[str] = None, **fields) -> User:
        for key, value in fields.items():
            if hasattr(user, key):
                setattr(user, key, value)

        if password:
            user.password_hash = hash_password(password)

        user.modify_date = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return user

    def soft_delete(self, user: User) -> None:
        user.is_delete = True
        user.is_active = False
        user.modify_date = utcnow()
        self.db.commit()

    def set_active(self, user: User, active: bool) -> User:
        user.is_active = active
        user.modify_date = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return user

    # Roles

    def list_roles(self) -> List[Role]:
        return self.db.query(Role).order_by(Role.id).all()

    def get_role(self, role_id: int) -> Optional[Role]:
        return self.db.query(Role).filter(Role.id == role_id).first()

    def role_name_taken(self, role_name: str) -> bool:
        return self.db.query(Role.id).filter(Role.role_name == role_name).first() is not None

    def create_role(self, **fields) -> Role:
        role = Role(**fields, is_active=True)
        self.db.add(role)
        self.db.commit()
        self.db.refresh(role)
        return role

    def get_user_roles(self, user_id: int) -> List[UserRole]:
        return self.db.query(UserRole).options(joinedload(UserRole.role)).filter(
            UserRole.user_id == user_id
        ).order_by(UserRole.id).all()

    def assign_role(self, user_id: int, role_id: int, assigned_by: Optional[int] = None) -> UserRole:
        """Assign a role to a user, re-activating an existing assignment"""
        user_role = self.db.query(UserRole).filter(
            UserRole.user_id == user_id,
            UserRole.role_id == role_id,
        ).first()

        if user_role:
            user_role.is_active = True
            user_role.assigned_by = assigned_by
            user_role.assigned_date = utcnow()
        else:
            user_role = UserRole(
                user_id=user_id,
                role_id=role_id,
                assigned_by=assigned_by,
                assigned_date=utcnow(),
                is_active=True,
            )
            self.db.add(user_role)

        self.db.commit()
        self.db.refresh(user_role)
        return user_role
