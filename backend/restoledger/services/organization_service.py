from __future__ import annotations

from ..extensions import db
from ..models import Organization, StockItem, Sale, Loss
from ..validation import ConflictError, NotFoundError
from .concurrency import lock_for_update, run_with_retry

ORGANIZATION_MUTABLE_FIELDS = {"name", "address"}


def list_organizations() -> list[Organization]:
    return db.session.query(Organization).order_by(Organization.name.asc(), Organization.id.asc()).all()


def get_organization(organization_id: int) -> Organization:
    org = db.session.get(Organization, organization_id)
    if org is None:
        raise NotFoundError("Organization not found")
    return org


def create_organization(*, patch: dict) -> Organization:
    def _op():
        org = Organization()
        for k, v in patch.items():
            if k in ORGANIZATION_MUTABLE_FIELDS:
                setattr(org, k, v)
        db.session.add(org)
        db.session.commit()
        return org

    return run_with_retry(_op)


def update_organization(organization_id: int, *, patch: dict) -> Organization:
    def _op():
        org = lock_for_update(db.session.query(Organization).filter_by(id=organization_id)).first()
        if not org:
            raise NotFoundError("Organization not found")
        for k, v in patch.items():
            if k in ORGANIZATION_MUTABLE_FIELDS:
                setattr(org, k, v)
        db.session.commit()
        return org

    return run_with_retry(_op)


def count_references(organization_id: int) -> dict[str, int]:
    return {
        "stock_items": db.session.query(StockItem).filter_by(organization_id=organization_id).count(),
        "sales": db.session.query(Sale).filter_by(organization_id=organization_id).count(),
        "losses": db.session.query(Loss).filter_by(organization_id=organization_id).count(),
    }


def delete_organization(organization_id: int) -> None:
    """
    Hard delete, RESTRICTED: an organization that still owns stock items,
    sales or losses cannot be removed. Delete those first.
    """
    def _op():
        org = db.session.get(Organization, organization_id)
        if org is None:
            raise NotFoundError("Organization not found")

        refs = {name: n for name, n in count_references(organization_id).items() if n}
        if refs:
            detail = ", ".join(f"{n} {name.replace('_', ' ')}" for name, n in refs.items())
            raise ConflictError(f"Organization is still referenced by {detail}")

        db.session.delete(org)
        db.session.commit()

    run_with_retry(_op)
