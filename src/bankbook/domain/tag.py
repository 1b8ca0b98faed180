"""Tag domain service."""

from typing import Optional

from sqlalchemy import insert

from bankbook.database.mappers import tag_to_domain
from bankbook.database.models import LineItem, Tag, line_item_tags
from bankbook.database.store import LedgerStore, generate_unique_id
from bankbook.domain.entities import Tag as TagEntity
from bankbook.domain.errors import ValidationError
from bankbook.utils import date_codec


def canonical_name(name: str) -> str:
    """Canonical form used for tag uniqueness."""
    return name.strip().upper()


class TagService:
    """Service for tags and their association with line items."""

    def __init__(self, store: LedgerStore):
        """Initialize tag service.

        Args:
            store: Open ledger store
        """
        self.store = store

    def create_tag(self, name: str) -> int:
        """Create a tag, or return the existing one with the same canonical name.

        Returns:
            Tag ID

        Raises:
            ValidationError: If the name is blank
        """
        canonical = canonical_name(name)
        if not canonical:
            raise ValidationError("Tag name cannot be empty")

        existing = self.store.session.query(Tag).filter(Tag.canonical_name == canonical).first()
        if existing is not None:
            return existing.id

        now = date_codec.now()
        tag = Tag(
            creation_time=now,
            modification_date=now,
            name=name.strip(),
            canonical_name=canonical,
            unique_id=generate_unique_id(),
            opt=0,
        )
        return self.store.insert(tag)

    def get_tag(self, tag_id: int) -> Optional[TagEntity]:
        tag = self.store.session.query(Tag).filter(Tag.id == tag_id).first()
        return tag_to_domain(tag) if tag else None

    def get_by_name(self, name: str) -> Optional[TagEntity]:
        """Look up a tag by name, ignoring case and surrounding whitespace."""
        tag = self.store.session.query(Tag).filter(Tag.canonical_name == canonical_name(name)).first()
        return tag_to_domain(tag) if tag else None

    def list_tags(self) -> list[TagEntity]:
        tags = self.store.session.query(Tag).order_by(Tag.name).all()
        return [tag_to_domain(tag) for tag in tags]

    def add_to_line_item(self, line_item_id: int, tag_id: int) -> bool:
        """Associate a tag with a line item.

        Returns:
            True if the association was added; False if it already existed

        Raises:
            IntegrityViolation: If the line item or tag does not exist
        """
        with self.store.atomic() as session:
            exists = (
                session.query(line_item_tags)
                .filter(
                    line_item_tags.c.Z_19PLINEITEMS == line_item_id,
                    line_item_tags.c.Z_47PTAGS == tag_id,
                )
                .first()
            )
            if exists is not None:
                return False
            session.execute(insert(line_item_tags).values(Z_19PLINEITEMS=line_item_id, Z_47PTAGS=tag_id))
            session.expire_all()
        return True

    def remove_from_line_item(self, line_item_id: int, tag_id: int) -> bool:
        """Remove a tag from a line item; returns False if it was not there."""
        removed = self.store.delete_rows(
            line_item_tags,
            line_item_tags.c.Z_19PLINEITEMS == line_item_id,
            line_item_tags.c.Z_47PTAGS == tag_id,
        )
        return removed > 0

    def tag_transaction(self, transaction_id: int, tag_id: int) -> int:
        """Tag every line item of a transaction.

        Returns:
            Number of line items newly tagged
        """
        added = 0
        with self.store.atomic():
            for line_item_id in self._line_item_ids(transaction_id):
                added += self.add_to_line_item(line_item_id, tag_id)
        return added

    def untag_transaction(self, transaction_id: int, tag_id: int) -> int:
        """Remove a tag from every line item of a transaction.

        Returns:
            Number of associations removed
        """
        removed = 0
        with self.store.atomic():
            for line_item_id in self._line_item_ids(transaction_id):
                removed += self.remove_from_line_item(line_item_id, tag_id)
        return removed

    def tags_for_line_item(self, line_item_id: int) -> list[TagEntity]:
        tags = (
            self.store.session.query(Tag)
            .join(line_item_tags, line_item_tags.c.Z_47PTAGS == Tag.id)
            .filter(line_item_tags.c.Z_19PLINEITEMS == line_item_id)
            .order_by(Tag.name)
            .all()
        )
        return [tag_to_domain(tag) for tag in tags]

    def delete_tag(self, tag_id: int) -> bool:
        """Delete a tag and all of its line item associations."""
        with self.store.atomic():
            self.store.delete_rows(line_item_tags, line_item_tags.c.Z_47PTAGS == tag_id)
            deleted = self.store.delete_rows(Tag, Tag.id == tag_id)
        return deleted > 0

    def _line_item_ids(self, transaction_id: int) -> list[int]:
        rows = (
            self.store.session.query(LineItem.id)
            .filter(LineItem.transaction_id == transaction_id)
            .order_by(LineItem.id)
            .all()
        )
        return [row.id for row in rows]
