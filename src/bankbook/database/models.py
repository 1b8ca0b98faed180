"""SQLAlchemy models for the ledger's physical tables.

Table and column names follow the ledger file format. Several logical
entities share one table and are told apart by the Z_ENT discriminator,
mapped here as single-table inheritance.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship

from bankbook.database.constants import EntityType

Base = declarative_base()


line_item_tags = Table(
    "Z_19PTAGS",
    Base.metadata,
    Column("Z_19PLINEITEMS", Integer, ForeignKey("ZLINEITEM.Z_PK"), primary_key=True),
    Column("Z_47PTAGS", Integer, ForeignKey("ZTAG.Z_PK"), primary_key=True),
)


class Currency(Base):
    """Currency model."""

    __tablename__ = "ZCURRENCY"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column("Z_PK", Integer, primary_key=True)
    entity = Column("Z_ENT", Integer)
    opt = Column("Z_OPT", Integer, default=0)
    code = Column("ZPCODE", String)
    name = Column("ZPNAME", String)


class TransactionType(Base):
    """Transaction type model (Withdrawal, Deposit, ...)."""

    __tablename__ = "ZTRANSACTIONTYPE"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column("Z_PK", Integer, primary_key=True)
    entity = Column("Z_ENT", Integer, default=int(EntityType.TRANSACTION_TYPE))
    opt = Column("Z_OPT", Integer, default=0)
    name = Column("ZPNAME", String)
    short_name = Column("ZPSHORTNAME", String)


class Account(Base):
    """Account model; base variant of the ZACCOUNT table."""

    __tablename__ = "ZACCOUNT"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column("Z_PK", Integer, primary_key=True)
    entity = Column("Z_ENT", Integer, nullable=False)
    opt = Column("Z_OPT", Integer, default=0)
    parent_id = Column("ZPPARENT", Integer)
    currency_id = Column("ZCURRENCY", Integer)
    account_class = Column("ZPACCOUNTCLASS", Integer)
    debit = Column("ZPDEBIT", Boolean, default=True)
    taxable = Column("ZPTAXABLE", Boolean, default=False)
    name = Column("ZPNAME", String)
    full_name = Column("ZPFULLNAME", String)
    hidden = Column("ZPHIDDEN", Boolean, default=False)
    creation_time = Column("ZPCREATIONTIME", Float)
    modification_date = Column("ZPMODIFICATIONDATE", Float)
    unique_id = Column("ZPUNIQUEID", String)

    currency = relationship(
        "Currency", primaryjoin="Account.currency_id == Currency.id", foreign_keys=[currency_id], viewonly=True
    )

    __mapper_args__ = {
        "polymorphic_on": entity,
        "polymorphic_identity": int(EntityType.ACCOUNT),
    }


class Category(Account):
    """Income or expense category."""

    __mapper_args__ = {"polymorphic_identity": int(EntityType.CATEGORY)}


class PrimaryAccount(Account):
    """Balance-bearing account (checking, savings, credit card)."""

    __mapper_args__ = {"polymorphic_identity": int(EntityType.PRIMARY_ACCOUNT)}


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "ZTRANSACTION"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column("Z_PK", Integer, primary_key=True)
    entity = Column("Z_ENT", Integer, default=int(EntityType.TRANSACTION))
    opt = Column("Z_OPT", Integer, default=0)
    transaction_type_id = Column("ZPTRANSACTIONTYPE", Integer)
    currency_id = Column("ZPCURRENCY", Integer)
    creation_time = Column("ZPCREATIONTIME", Float)
    date = Column("ZPDATE", Float)
    modification_date = Column("ZPMODIFICATIONDATE", Float)
    title = Column("ZPTITLE", String)
    note = Column("ZPNOTE", String)
    unique_id = Column("ZPUNIQUEID", String)
    cleared = Column("ZPCLEARED", Boolean, default=False)
    void = Column("ZPVOID", Boolean, default=False)

    transaction_type = relationship(
        "TransactionType",
        primaryjoin="Transaction.transaction_type_id == TransactionType.id",
        foreign_keys=[transaction_type_id],
        viewonly=True,
    )
    line_items = relationship("LineItem", order_by="LineItem.id", viewonly=True)


class LineItem(Base):
    """One leg of a transaction against a single account."""

    __tablename__ = "ZLINEITEM"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column("Z_PK", Integer, primary_key=True)
    entity = Column("Z_ENT", Integer, default=int(EntityType.LINEITEM))
    opt = Column("Z_OPT", Integer, default=0)
    account_id = Column("ZPACCOUNT", Integer, ForeignKey("ZACCOUNT.Z_PK"))
    transaction_id = Column("ZPTRANSACTION", Integer, ForeignKey("ZTRANSACTION.Z_PK"))
    creation_time = Column("ZPCREATIONTIME", Float)
    amount = Column("ZPTRANSACTIONAMOUNT", Numeric(18, 2))
    exchange_rate = Column("ZPEXCHANGERATE", Float, default=1.0)
    running_balance = Column("ZPRUNNINGBALANCE", Numeric(18, 2), default=0)
    memo = Column("ZPMEMO", String)
    unique_id = Column("ZPUNIQUEID", String)
    cleared = Column("ZPCLEARED", Boolean, default=False)

    account = relationship("Account", viewonly=True)
    transaction = relationship("Transaction", viewonly=True)
    tags = relationship("Tag", secondary=line_item_tags, viewonly=True)


class Tag(Base):
    """Tag model; uniqueness is by canonical name."""

    __tablename__ = "ZTAG"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column("Z_PK", Integer, primary_key=True)
    entity = Column("Z_ENT", Integer, default=int(EntityType.TAG))
    opt = Column("Z_OPT", Integer, default=0)
    creation_time = Column("ZPCREATIONTIME", Float)
    modification_date = Column("ZPMODIFICATIONDATE", Float)
    name = Column("ZPNAME", String)
    canonical_name = Column("ZPCANONICALNAME", String)
    unique_id = Column("ZPUNIQUEID", String)


class TransactionTemplate(Base):
    """Reusable payee/amount/note template."""

    __tablename__ = "ZTRANSACTIONTEMPLATE"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column("Z_PK", Integer, primary_key=True)
    entity = Column("Z_ENT", Integer, default=int(EntityType.TRANSACTION_TEMPLATE))
    opt = Column("Z_OPT", Integer, default=0)
    active = Column("ZPACTIVE", Boolean, default=True)
    fixed_amount = Column("ZPFIXEDAMOUNT", Boolean, default=True)
    creation_time = Column("ZPCREATIONTIME", Float)
    modification_date = Column("ZPMODIFICATIONDATE", Float)
    last_applied_date = Column("ZPLASTAPPLIEDDATE", Float)
    amount = Column("ZPAMOUNT", Numeric(18, 2))
    currency_id = Column("ZPCURRENCYID", String)
    note = Column("ZPNOTE", String)
    title = Column("ZPTITLE", String)
    unique_id = Column("ZPUNIQUEID", String)

    line_items = relationship("LineItemTemplate", order_by="LineItemTemplate.id", viewonly=True)


class LineItemTemplate(Base):
    """Line item of a template; the account is referenced by its unique id."""

    __tablename__ = "ZLINEITEMTEMPLATE"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column("Z_PK", Integer, primary_key=True)
    entity = Column("Z_ENT", Integer, default=int(EntityType.LINEITEM_TEMPLATE))
    opt = Column("Z_OPT", Integer, default=0)
    fixed_amount = Column("ZPFIXEDAMOUNT", Boolean, default=True)
    template_id = Column("ZPTRANSACTIONTEMPLATE", Integer, ForeignKey("ZTRANSACTIONTEMPLATE.Z_PK"))
    creation_time = Column("ZPCREATIONTIME", Float)
    amount = Column("ZPTRANSACTIONAMOUNT", Numeric(18, 2))
    account_unique_id = Column("ZPACCOUNTID", String)
    memo = Column("ZPMEMO", String)


class RecurringTransaction(Base):
    """Auxiliary row owned by a scheduled transaction selector."""

    __tablename__ = "ZRECURRINGTRANSACTION"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column("Z_PK", Integer, primary_key=True)
    entity = Column("Z_ENT", Integer, default=int(EntityType.RECURRING_TRANSACTION))
    opt = Column("Z_OPT", Integer, default=0)
    attributes = Column("ZPATTRIBUTES", Integer, default=1)
    priority = Column("ZPPRIORITY", Integer, default=0)
    remind_days_in_advance = Column("ZPREMINDDAYSINADVANCE", Integer)
    creation_time = Column("ZPCREATIONTIME", Float)
    first_unprocessed_event_date = Column("ZPFIRSTUNPROCESSEDEVENTDATE", Float)
    modification_date = Column("ZPMODIFICATIONDATE", Float)
    unique_id = Column("ZPUNIQUEID", String)


class TemplateSelector(Base):
    """Polymorphic selector row referencing a transaction template."""

    __tablename__ = "ZTEMPLATESELECTOR"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column("Z_PK", Integer, primary_key=True)
    entity = Column("Z_ENT", Integer, nullable=False)
    opt = Column("Z_OPT", Integer, default=0)
    template_id = Column("ZPTRANSACTIONTEMPLATE", Integer, ForeignKey("ZTRANSACTIONTEMPLATE.Z_PK"))
    recurring_transaction_id = Column("ZPRECURRINGTRANSACTION", Integer)
    creation_time = Column("ZPCREATIONTIME", Float)
    modification_date = Column("ZPMODIFICATIONDATE", Float)
    start_date = Column("ZPSTARTDATE", Float)
    next_date = Column("ZPEXTERNALCALENDARNEXTDATE", Float)
    repeat_interval = Column("ZPREPEATINTERVAL", Integer)
    repeat_multiplier = Column("ZPREPEATMULTIPLIER", Integer)
    details_expression = Column("ZPDETAILSEXPRESSION", String)
    account_unique_id = Column("ZPACCOUNTID", String)
    payee = Column("ZPPAYEE", String)
    remind_days_in_advance = Column("ZPREMINDDAYSINADVANCE", Integer)
    unique_id = Column("ZPUNIQUEID", String)

    template = relationship("TransactionTemplate", viewonly=True)

    __mapper_args__ = {
        "polymorphic_on": entity,
        "polymorphic_identity": int(EntityType.TEMPLATE_SELECTOR),
    }


class ImportRule(TemplateSelector):
    """Import-source selector: a regex over imported descriptions."""

    __mapper_args__ = {"polymorphic_identity": int(EntityType.IMPORT_SOURCE_TEMPLATE_SELECTOR)}


class ScheduledTransaction(TemplateSelector):
    """Scheduled selector: recurrence parameters plus a recurring transaction row."""

    __mapper_args__ = {"polymorphic_identity": int(EntityType.SCHEDULED_TEMPLATE_SELECTOR)}


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def create_ledger_engine(database_url: str, readonly: bool = False) -> Engine:
    """Create an engine with foreign keys enforced on every connection.

    Missing tables are created for writable ledgers; existing tables are left alone.
    """
    engine = create_engine(database_url, echo=False)
    event.listen(engine, "connect", _enable_foreign_keys)
    if not readonly:
        Base.metadata.create_all(engine)
    return engine

