from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict

from camt053.message import Message
from camt053.models import BalanceType

# Currency and Iban value objects render as their code/electronic form.
CodeStr = Annotated[str, BeforeValidator(str)]


class PydanticMoney(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    minor_units: int
    currency: CodeStr
    amount: Decimal


class PydanticAddress(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    country: Optional[str] = None
    lines: List[str] = []


class PydanticAccount(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    iban: CodeStr
    currency: Optional[str] = None
    owner_name: Optional[str] = None


class PydanticCreditor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    address: Optional[PydanticAddress] = None


class PydanticRelatedParty(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    creditor: PydanticCreditor
    account: PydanticAccount


class PydanticReference(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    end_to_end_id: str
    mandate_id: Optional[str] = None


class PydanticRemittanceInformation(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    unstructured: str


class PydanticTransactionDetail(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    references: List[PydanticReference] = []
    related_parties: List[PydanticRelatedParty] = []
    remittance_information: Optional[PydanticRemittanceInformation] = None


class PydanticEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    amount: PydanticMoney
    booking_date: Optional[datetime] = None
    value_date: Optional[datetime] = None
    transaction_details: List[PydanticTransactionDetail] = []
    reference: Optional[str] = None
    status: Optional[str] = None
    account_servicer_reference: Optional[str] = None
    additional_information: Optional[str] = None


class PydanticBalance(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: BalanceType
    amount: PydanticMoney
    date: datetime
    code: Optional[str] = None


class PydanticStatement(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_on: datetime
    account: PydanticAccount
    balances: List[PydanticBalance] = []
    entries: List[PydanticEntry] = []
    electronic_sequence_number: Optional[int] = None
    additional_information: Optional[str] = None


class PydanticGroupHeader(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message_id: str
    created_on: datetime


class PydanticMessage(BaseModel):
    group_header: PydanticGroupHeader
    statements: List[PydanticStatement]


def from_message(message: Message) -> PydanticMessage:
    """
    Converts a decoded Message into its Pydantic equivalent, ready for
    ``model_dump_json()``.
    """
    return PydanticMessage(
        group_header=PydanticGroupHeader.model_validate(message.get_group_header()),
        statements=[PydanticStatement.model_validate(s) for s in message.get_statements()],
    )
