"""
Incoming record schemas

Pydantic models for the five record variants. Rows are validated here, at the
input boundary, so the engine only ever receives well-formed records.
"""

from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .accounts import MAX_CLIENT_ID
from .amount import Amount, amount_from_string
from .errors import MalformedRecord

# Transaction ids are unsigned 32-bit integers
MAX_TX_ID = 2 ** 32 - 1


class BaseRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    client: int = Field(..., ge=0, le=MAX_CLIENT_ID)
    tx: int = Field(..., ge=0, le=MAX_TX_ID)


class FundsRecord(BaseRecord):
    """Record that moves money and creates a ledger entry"""
    amount: Amount

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, v: Any) -> Amount:
        if isinstance(v, Amount):
            return v
        return amount_from_string(v)


class DepositRecord(FundsRecord):
    type: Literal["deposit"] = "deposit"


class WithdrawalRecord(FundsRecord):
    type: Literal["withdrawal"] = "withdrawal"


class DisputeRecord(BaseRecord):
    type: Literal["dispute"] = "dispute"


class ResolveRecord(BaseRecord):
    type: Literal["resolve"] = "resolve"


class ChargebackRecord(BaseRecord):
    type: Literal["chargeback"] = "chargeback"


IncomingRecord = Annotated[
    Union[DepositRecord, WithdrawalRecord, DisputeRecord, ResolveRecord, ChargebackRecord],
    Field(discriminator="type")
]

_record_adapter = TypeAdapter(IncomingRecord)


def normalize_row(row: Mapping[Optional[str], Any]) -> Dict[str, Any]:
    """
    Clean a raw CSV row before validation

    Strips whitespace from keys and values, lowercases the record type and
    drops an empty amount so that dispute-style rows validate.
    """
    data: Dict[str, Any] = {}
    for key, value in row.items():
        if key is None:
            # Surplus columns beyond the header
            data["_extra"] = value
            continue
        key = key.strip().lower()
        if isinstance(value, str):
            value = value.strip()
        data[key] = value

    if isinstance(data.get("type"), str):
        data["type"] = data["type"].lower()

    if data.get("amount") in ("", None):
        data.pop("amount", None)

    return data


def parse_record(row: Mapping[Optional[str], Any], line: Optional[int] = None) -> IncomingRecord:
    """
    Validate one input row into a record

    Args:
        row: Mapping with keys type, client, tx and optionally amount
        line: Line number used in the error message

    Returns:
        One of the five record models

    Raises:
        MalformedRecord: If the row is not a well-formed record
    """
    try:
        return _record_adapter.validate_python(normalize_row(row))
    except ValidationError as e:
        reasons = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'row'}: {err['msg']}"
            for err in e.errors()
        )
        raise MalformedRecord(reasons, line=line) from e
