import logging
from gym_api.core.config import settings
from gym_api.database import SessionLocal
from gym_api.models.branch import Branch
from gym_api.models.user import User, UserRole

logger = logging.getLogger(__name__)

def init_system_data():
    """
    Checks if the system needs initialization.
    If no user exists, creates a default branch and a superadmin.
    """
    if not settings.bootstrap_enabled:
        return

    db = SessionLocal()
    try:
        user_count = db.query(User).count()
        if user_count == 0:
            logger.info("Running startup initialization...")

            branch = db.query(Branch).filter(Branch.name == settings.bootstrap_branch_name).first()
            if not branch:
                branch = Branch(name=settings.bootstrap_branch_name)
                db.add(branch)
                db.flush()

            admin = User(
                first_name="Super",
                last_name="Admin",
                email=settings.bootstrap_admin_email,
                role=UserRole.SUPERADMIN,
                branch_id=branch.id,
                is_active=True
            )
            db.add(admin)
            db.commit()
            logger.info(f"✓ Created default superadmin {admin.email} (id={admin.id}) in '{branch.name}'")
        else:
            logger.info(f"System initialization check: {user_count} user(s) found.")

    except Exception as e:
        db.rollback()
        logger.error(f"Error during system initialization check: {str(e)}", exc_info=True)
    finally:
        db.close()
