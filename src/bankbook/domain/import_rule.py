"""Import rule domain service: regex selectors that suggest templates."""

import logging
import re
from typing import Any, Optional

from bankbook.database.constants import EntityType
from bankbook.database.mappers import import_rule_to_domain
from bankbook.database.models import ImportRule, TemplateSelector, TransactionTemplate
from bankbook.database.store import UNSET, LedgerStore, generate_unique_id
from bankbook.domain.entities import ImportRule as ImportRuleEntity
from bankbook.domain.errors import ValidationError
from bankbook.utils import date_codec

logger = logging.getLogger(__name__)

_IS_IMPORT_RULE = TemplateSelector.entity == int(EntityType.IMPORT_SOURCE_TEMPLATE_SELECTOR)


class ImportRuleService:
    """Service for import rules."""

    def __init__(self, store: LedgerStore):
        """Initialize import rule service.

        Args:
            store: Open ledger store
        """
        self.store = store

    def create_rule(
        self,
        template_id: int,
        pattern: str,
        account_id: Optional[str] = None,
        payee: Optional[str] = None,
    ) -> int:
        """Create an import rule for a template.

        Args:
            template_id: Template suggested when the rule matches
            pattern: Regular expression matched against descriptions
            account_id: Optional account unique id the rule is restricted to
            payee: Optional payee override

        Returns:
            Rule ID

        Raises:
            ValidationError: If the pattern is empty
            IntegrityViolation: If the template does not exist
        """
        if not pattern:
            raise ValidationError("Import rule pattern cannot be empty")

        now = date_codec.now()
        rule = ImportRule(
            template_id=template_id,
            details_expression=pattern,
            account_unique_id=account_id,
            payee=payee,
            creation_time=now,
            modification_date=now,
            unique_id=generate_unique_id(),
            opt=0,
        )
        return self.store.insert(rule)

    def get_rule(self, rule_id: int) -> Optional[ImportRuleEntity]:
        rule = self.store.session.query(ImportRule).filter(ImportRule.id == rule_id).first()
        return import_rule_to_domain(rule) if rule else None

    def list_rules(self) -> list[ImportRuleEntity]:
        """List import rules ordered by their template's title."""
        rules = (
            self.store.session.query(ImportRule)
            .join(TransactionTemplate, ImportRule.template_id == TransactionTemplate.id)
            .order_by(TransactionTemplate.title, ImportRule.id)
            .all()
        )
        return [import_rule_to_domain(rule) for rule in rules]

    def update_rule(
        self, rule_id: int, pattern: Any = UNSET, account_id: Any = UNSET, payee: Any = UNSET
    ) -> bool:
        """Update provided rule fields; returns False if not found or nothing to update."""
        changed = self.store.update_fields(
            TemplateSelector,
            rule_id,
            {"pattern": pattern, "account_id": account_id, "payee": payee},
            {"pattern": "details_expression", "account_id": "account_unique_id"},
            criteria=(_IS_IMPORT_RULE,),
        )
        return changed > 0

    def delete_rule(self, rule_id: int) -> bool:
        deleted = self.store.delete_rows(TemplateSelector, TemplateSelector.id == rule_id, _IS_IMPORT_RULE)
        return deleted > 0

    def match(self, description: str) -> list[ImportRuleEntity]:
        """Return every rule whose pattern matches the description.

        Matching is a case-insensitive regex search. Rules whose pattern does
        not compile are skipped.
        """
        matches = []
        for rule in self.list_rules():
            if not rule.pattern:
                continue
            try:
                regex = re.compile(rule.pattern, re.IGNORECASE)
            except re.error as e:
                logger.warning("Skipping import rule %s with invalid pattern %r: %s", rule.id, rule.pattern, e)
                continue
            if regex.search(description):
                matches.append(rule)
        return matches
