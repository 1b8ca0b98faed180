"""Domain layer for bankbook application."""

_SERVICES = {
    "AccountService": "bankbook.domain.account",
    "TransactionService": "bankbook.domain.transaction",
    "LineItemService": "bankbook.domain.line_item",
    "TagService": "bankbook.domain.tag",
    "TemplateService": "bankbook.domain.template",
    "ImportRuleService": "bankbook.domain.import_rule",
    "ScheduleService": "bankbook.domain.schedule",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports domain entities; resolve lazily.
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
