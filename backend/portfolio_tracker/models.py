# backend/portfolio_tracker/models.py
import datetime as dt
import enum
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, ForeignKey, Enum, Numeric, UniqueConstraint, Boolean, JSON, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssetType(str, enum.Enum):
    STOCK = "stock"
    BOND = "bond"
    CASH = "cash"


class TradeType(str, enum.Enum):
    BUY = "buy"
    SELL = "sell"


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.USER)
    # Last issued access token; a bearer token must match it to authenticate
    token: Mapped[str | None] = mapped_column(String, nullable=True, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    portfolios: Mapped[list["Portfolio"]] = relationship(back_populates="owner")


class Asset(Base):
    """
    Global catalogue of tradable assets shared by all users.

    Price history is stored as two parallel JSON arrays of equal length:
    history_dates[i] (ISO date string) corresponds to history_prices[i].
    Consumers align series of different assets by index, not by date.
    """
    __tablename__ = "assets"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    asset_code: Mapped[str] = mapped_column(String(50), unique=True, index=True)  # e.g. "AAPL"
    name: Mapped[str] = mapped_column(String(200))
    asset_type: Mapped[AssetType] = mapped_column(Enum(AssetType), index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(15, 4))
    currency: Mapped[str] = mapped_column(String(10), default="USD")
    history_prices: Mapped[list] = mapped_column(JSON, default=list)
    history_dates: Mapped[list] = mapped_column(JSON, default=list)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class Portfolio(Base):
    __tablename__ = "portfolios"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    name: Mapped[str] = mapped_column(String(100))
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    owner: Mapped["User"] = relationship(back_populates="portfolios")
    items: Mapped[list["PortfolioItem"]] = relationship(
        back_populates="portfolio",
        order_by="PortfolioItem.id",
    )


class PortfolioItem(Base):
    """
    One buy or sell entry in a portfolio ledger.

    amount is the total cost of a buy or the total proceeds of a sell;
    the unit price is amount / quantity.
    """
    __tablename__ = "portfolio_items"
    __table_args__ = (
        Index('ix_portfolio_item_portfolio_asset', 'portfolio_id', 'asset_code'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    portfolio_id: Mapped[int] = mapped_column(ForeignKey("portfolios.id"), index=True)
    asset_code: Mapped[str] = mapped_column(String(50), index=True)
    asset_type: Mapped[AssetType] = mapped_column(Enum(AssetType))
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    quantity: Mapped[Decimal] = mapped_column(Numeric(18, 4))
    type: Mapped[TradeType] = mapped_column(Enum(TradeType))
    purchase_date: Mapped[date] = mapped_column(Date)
    sell_date: Mapped[date | None] = mapped_column(Date, nullable=True, default=None)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    portfolio: Mapped["Portfolio"] = relationship(back_populates="items")
    profit_logs: Mapped[list["ProfitLog"]] = relationship(back_populates="item")


class ProfitLog(Base):
    """Daily value/profit snapshot of one portfolio item."""
    __tablename__ = "profit_logs"
    __table_args__ = (
        UniqueConstraint('item_id', 'date', name='uq_profit_log_item_date'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("portfolio_items.id"), index=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    value: Mapped[Decimal] = mapped_column(Numeric(15, 2))
    profit: Mapped[Decimal] = mapped_column(Numeric(15, 2))
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    item: Mapped["PortfolioItem"] = relationship(back_populates="profit_logs")
