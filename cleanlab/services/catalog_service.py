"""
Read-only service catalog
"""
from sqlalchemy.orm import Session
from cleanlab.database import store_guard
from cleanlab.errors import NotFoundError
from cleanlab.logger import logger
from cleanlab.models import Service

DEFAULT_SERVICES = [
    # name, standard price, express price, category
    ("Suits", 3000, 7000, "dry_cleaning"),
    ("Dress", 3000, 6000, "dry_cleaning"),
    ("Bride Dress", 8000, 16000, "dry_cleaning"),
    ("Coat", 2500, 5000, "dry_cleaning"),
    ("Umushanana", 3500, 7000, "dry_cleaning"),
    ("Shirt", 1500, 3000, "laundry"),
    ("Trouser", 1500, 3000, "laundry"),
    ("Bed Cover (big)", 10000, 20000, "laundry"),
    ("Curtains (big)", 15000, 30000, "laundry"),
    ("Shoes", 10000, 20000, "special"),
]


def list_services(db: Session, category: str | None = None) -> list[Service]:
    """Active services ordered by category, then name"""
    with store_guard(db, "list_services"):
        query = db.query(Service).filter(Service.is_active.is_(True))
        if category:
            query = query.filter(Service.category == category)
        return query.order_by(Service.category, Service.name).all()


def list_all_services(db: Session) -> list[Service]:
    """Every service including retired ones, for the admin dashboard"""
    with store_guard(db, "list_all_services"):
        return db.query(Service).order_by(Service.category, Service.name).all()


def get_active_service(db: Session, service_id: int) -> Service:
    service = (
        db.query(Service)
        .filter(Service.id == service_id, Service.is_active.is_(True))
        .first()
    )
    if not service:
        raise NotFoundError("Service not found")
    return service


def seed_default_services(db: Session) -> int:
    """Insert the default catalog into an empty services table"""
    with store_guard(db, "seed_default_services"):
        if db.query(Service).count() > 0:
            return 0

        db.add_all(
            Service(
                name=name,
                base_price=standard_price,
                express_price=express_price,
                category=category,
            )
            for name, standard_price, express_price, category in DEFAULT_SERVICES
        )
        db.commit()
        logger.info(f"Default services inserted ({len(DEFAULT_SERVICES)})")
        return len(DEFAULT_SERVICES)
