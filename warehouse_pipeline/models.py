"""
Code tables and table schemas shared by the bronze and silver layers.

Source systems encode a few attributes as short codes ('S'/'M', 'F'/'M', ...).
Each attribute gets an enumeration of its descriptive labels, an explicit
code -> label mapping table and a fallback member used for anything the
table does not cover.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

NOT_AVAILABLE = "n/a"


class MaritalStatus(str, Enum):
    SINGLE = "Single"
    MARRIED = "Married"
    UNKNOWN = NOT_AVAILABLE


class Gender(str, Enum):
    FEMALE = "Female"
    MALE = "Male"
    UNKNOWN = NOT_AVAILABLE


class ProductLine(str, Enum):
    MOUNTAIN = "Mountain"
    ROAD = "Road"
    OTHER_SALES = "Other Sales"
    TOURING = "Touring"
    UNKNOWN = NOT_AVAILABLE


MARITAL_STATUS_CODES: Dict[str, MaritalStatus] = {
    "S": MaritalStatus.SINGLE,
    "M": MaritalStatus.MARRIED,
}

# CRM only ever ships single-letter codes
CRM_GENDER_CODES: Dict[str, Gender] = {
    "F": Gender.FEMALE,
    "M": Gender.MALE,
}

ERP_GENDER_CODES: Dict[str, Gender] = {
    "F": Gender.FEMALE,
    "FEMALE": Gender.FEMALE,
    "M": Gender.MALE,
    "MALE": Gender.MALE,
}

PRODUCT_LINE_CODES: Dict[str, ProductLine] = {
    "M": ProductLine.MOUNTAIN,
    "R": ProductLine.ROAD,
    "S": ProductLine.OTHER_SALES,
    "T": ProductLine.TOURING,
}

# Country codes are expanded; any other non-blank value is kept as given.
COUNTRY_CODES: Dict[str, str] = {
    "DE": "Germany",
    "US": "United States",
    "USA": "United States",
}


@dataclass(frozen=True)
class TableSchema:
    """
    Fixed column layout of one warehouse table.

    Attributes:
        name: Table name (identical in the bronze and silver databases)
        columns: Ordered mapping of column name to SQLite column type
        date_columns: Columns holding calendar dates
        defaults: Extra columns filled by the database on insert
    """
    name: str
    columns: Dict[str, str]
    date_columns: Tuple[str, ...] = ()
    defaults: Dict[str, str] = field(default_factory=dict)

    @property
    def column_names(self) -> List[str]:
        return list(self.columns)

    def create_statement(self) -> str:
        """Return the CREATE TABLE statement for this schema."""
        definitions = [f"{name} {sql_type}" for name, sql_type in self.columns.items()]
        definitions += [f"{name} {clause}" for name, clause in self.defaults.items()]
        body = ",\n            ".join(definitions)
        return f"""
        CREATE TABLE IF NOT EXISTS {self.name} (
            {body}
        )
        """
