"""
Code Store: durable storage for payment orders and redemption codes.

Two interchangeable backends share one interface:
- DbCodeStore: payment_orders / redemption_codes tables via Tortoise ORM.
  Conditional updates are a single UPDATE ... WHERE, so they are atomic.
- JsonFileCodeStore: orders.json + codes.json (arrays of records) in DATA_DIR.
  Whole-document read-modify-write, serialized by one asyncio.Lock per
  directory. Safe inside one process only; several workers sharing the
  directory can still lose writes.

Pick the backend with CODE_STORE_BACKEND=db|file.
"""
import asyncio
import datetime as dt
import json
import logging
import os
import uuid
from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from wordmate.config import settings
from wordmate.core.timeutil import ensure_aware, utc_now
from wordmate.models.order import PaymentOrder
from wordmate.models.redemption_code import RedemptionCode
from wordmate.services.errors import StoreWriteFailed

logger = logging.getLogger("uvicorn.error")


class OrderRecord(BaseModel):
    id: str
    email: str
    plan_id: str
    plan_name: str
    plan_period: str
    amount: Decimal
    currency: str = "CNY"
    payment_method: str = "wechat"
    notes: Optional[str] = None
    status: str = "pending"
    created_at: dt.datetime
    paid_at: Optional[dt.datetime] = None
    redemption_code: Optional[str] = None


class CodeRecord(BaseModel):
    code: str
    order_id: Optional[str] = None
    email: Optional[str] = None
    plan_name: Optional[str] = None
    period: Optional[str] = None
    status: str = "unused"
    expires_at: Optional[dt.datetime] = None
    created_at: dt.datetime
    used_at: Optional[dt.datetime] = None
    used_by: Optional[str] = None


class CodeStore(ABC):
    """Storage contract used by the order lifecycle and redemption services."""

    @abstractmethod
    async def create_order(self, attrs: dict) -> OrderRecord:
        """Persist a new order; assigns id and created_at, forces status=pending."""

    @abstractmethod
    async def get_order(self, order_id: str) -> Optional[OrderRecord]:
        ...

    @abstractmethod
    async def update_order(self, order_id: str, patch: dict) -> Optional[OrderRecord]:
        """Partial update, last write wins. None if the order does not exist."""

    @abstractmethod
    async def list_orders(self, status: Optional[str] = None) -> list[OrderRecord]:
        """All orders, newest first, optionally filtered by status."""

    @abstractmethod
    async def create_code(self, attrs: dict) -> CodeRecord:
        ...

    @abstractmethod
    async def find_code(self, code: str) -> Optional[CodeRecord]:
        """Exact match on the stored canonical form."""

    @abstractmethod
    async def update_code(
        self, code: str, patch: dict, expected_status: Optional[str] = None
    ) -> Optional[CodeRecord]:
        """
        Partial update. With expected_status the update only applies while the
        stored status still equals it (compare-and-swap); None means no row
        matched.
        """


# ==============================================================================
# Relational backend
# ==============================================================================
def _order_to_record(o: PaymentOrder) -> OrderRecord:
    return OrderRecord(
        id=str(o.id),
        email=o.email,
        plan_id=o.plan_id,
        plan_name=o.plan_name,
        plan_period=o.plan_period,
        amount=o.amount,
        currency=o.currency,
        payment_method=o.payment_method,
        notes=o.notes,
        status=o.status,
        created_at=ensure_aware(o.created_at),
        paid_at=ensure_aware(o.paid_at),
        redemption_code=o.redemption_code,
    )


def _code_to_record(c: RedemptionCode) -> CodeRecord:
    return CodeRecord(
        code=c.code,
        order_id=str(c.order_id) if c.order_id else None,
        email=c.email,
        plan_name=c.plan_name,
        period=c.period,
        status=c.status,
        expires_at=ensure_aware(c.expires_at),
        created_at=ensure_aware(c.created_at),
        used_at=ensure_aware(c.used_at),
        used_by=str(c.used_by_id) if c.used_by_id else None,
    )


# Record field -> model column where they differ
_CODE_COLUMNS = {"used_by": "used_by_id", "order_id": "order_id"}


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


class DbCodeStore(CodeStore):

    async def create_order(self, attrs: dict) -> OrderRecord:
        fields = {k: v for k, v in attrs.items() if k not in ("id", "status", "created_at")}
        o = await PaymentOrder.create(**fields, status="pending")
        return _order_to_record(o)

    async def get_order(self, order_id: str) -> Optional[OrderRecord]:
        if not _is_uuid(order_id):
            return None
        o = await PaymentOrder.get_or_none(id=order_id)
        return _order_to_record(o) if o else None

    async def update_order(self, order_id: str, patch: dict) -> Optional[OrderRecord]:
        if not _is_uuid(order_id):
            return None
        updated = await PaymentOrder.filter(id=order_id).update(**patch)
        if not updated:
            return None
        return await self.get_order(order_id)

    async def list_orders(self, status: Optional[str] = None) -> list[OrderRecord]:
        qs = PaymentOrder.all().order_by("-created_at")
        if status:
            qs = qs.filter(status=status)
        return [_order_to_record(o) for o in await qs]

    async def create_code(self, attrs: dict) -> CodeRecord:
        fields = {_CODE_COLUMNS.get(k, k): v for k, v in attrs.items() if k != "created_at"}
        c = await RedemptionCode.create(**fields)
        return _code_to_record(c)

    async def find_code(self, code: str) -> Optional[CodeRecord]:
        c = await RedemptionCode.get_or_none(code=code)
        return _code_to_record(c) if c else None

    async def update_code(
        self, code: str, patch: dict, expected_status: Optional[str] = None
    ) -> Optional[CodeRecord]:
        qs = RedemptionCode.filter(code=code)
        if expected_status is not None:
            qs = qs.filter(status=expected_status)
        updated = await qs.update(**{_CODE_COLUMNS.get(k, k): v for k, v in patch.items()})
        if not updated:
            return None
        return await self.find_code(code)


# ==============================================================================
# File backend (orders.json / codes.json)
# ==============================================================================
_DIR_LOCKS: dict[str, asyncio.Lock] = {}


class JsonFileCodeStore(CodeStore):

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self.orders_file = self.data_dir / "orders.json"
        self.codes_file = self.data_dir / "codes.json"
        self._lock = _DIR_LOCKS.setdefault(str(self.data_dir.resolve()), asyncio.Lock())

    # ---- document I/O ----
    def _read(self, path: Path, for_write: bool = False) -> list[dict]:
        """
        Rows of one document; a missing file is empty. An unreadable document
        reads as empty for lookups, but refuses writes so it is never replaced.
        """
        if not path.exists():
            return []
        try:
            rows = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            rows = None
        if not isinstance(rows, list):
            if for_write:
                logger.error("[code-store] refusing to overwrite unreadable document %s", path)
                raise StoreWriteFailed()
            logger.warning("[code-store] unreadable document %s, treating as empty", path)
            return []
        return rows

    def _write(self, path: Path, rows: list[dict]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(json.dumps(rows, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, path)  # Readers never see a half-written document

    # ---- orders ----
    async def create_order(self, attrs: dict) -> OrderRecord:
        record = OrderRecord(
            **{k: v for k, v in attrs.items() if k not in ("id", "status", "created_at")},
            id=str(uuid.uuid4()),
            status="pending",
            created_at=utc_now(),
        )
        async with self._lock:
            rows = self._read(self.orders_file, for_write=True)
            rows.append(record.model_dump(mode="json"))
            self._write(self.orders_file, rows)
        return record

    async def get_order(self, order_id: str) -> Optional[OrderRecord]:
        for row in self._read(self.orders_file):
            if row.get("id") == order_id:
                return OrderRecord.model_validate(row)
        return None

    async def update_order(self, order_id: str, patch: dict) -> Optional[OrderRecord]:
        async with self._lock:
            rows = self._read(self.orders_file, for_write=True)
            for i, row in enumerate(rows):
                if row.get("id") == order_id:
                    record = OrderRecord.model_validate({**OrderRecord.model_validate(row).model_dump(), **patch})
                    rows[i] = record.model_dump(mode="json")
                    self._write(self.orders_file, rows)
                    return record
        return None

    async def list_orders(self, status: Optional[str] = None) -> list[OrderRecord]:
        records = [OrderRecord.model_validate(r) for r in self._read(self.orders_file)]
        if status:
            records = [r for r in records if r.status == status]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    # ---- codes ----
    async def create_code(self, attrs: dict) -> CodeRecord:
        record = CodeRecord.model_validate({"created_at": utc_now(), **attrs})
        async with self._lock:
            rows = self._read(self.codes_file, for_write=True)
            rows.append(record.model_dump(mode="json"))
            self._write(self.codes_file, rows)
        return record

    async def find_code(self, code: str) -> Optional[CodeRecord]:
        for row in self._read(self.codes_file):
            if row.get("code") == code:
                return CodeRecord.model_validate(row)
        return None

    async def update_code(
        self, code: str, patch: dict, expected_status: Optional[str] = None
    ) -> Optional[CodeRecord]:
        async with self._lock:
            rows = self._read(self.codes_file, for_write=True)
            for i, row in enumerate(rows):
                if row.get("code") != code:
                    continue
                current = CodeRecord.model_validate(row)
                if expected_status is not None and current.status != expected_status:
                    return None
                record = CodeRecord.model_validate({**current.model_dump(), **patch})
                rows[i] = record.model_dump(mode="json")
                self._write(self.codes_file, rows)
                return record
        return None


def get_code_store() -> CodeStore:
    """Backend selected by CODE_STORE_BACKEND (read per call so tests can switch)."""
    if settings.code_store_backend == "file":
        return JsonFileCodeStore(settings.data_dir)
    return DbCodeStore()
