"""End-to-end tests building complete schema graphs."""

import json
from dataclasses import dataclass
from typing import List, Optional, Union

import pyarrow as pa
import pytest
from click.testing import CliRunner
from pydantic import BaseModel, Field

from schemagraph import build_document, build_schema
from schemagraph.cli.main import main
from schemagraph.contracts import Contract, Each, optional, pred, required
from schemagraph.core.schema.serialize import REF_PREFIX


class AddressContract(Contract):
    street = required(str, pred("filled?"))
    zip = required(str, pred("format?", r"^\d{5}$"))


class CustomerContract(Contract):
    """A registered customer."""

    id = required(int, pred("gt?", 0))
    email = required(str, pred("email?"))
    tier = required(str, pred("included_in?", ["free", "pro", "team"]))
    address = optional(AddressContract)
    referrer = optional(Optional["CustomerContract"])
    nicknames = optional(List[str], pred("max_size?", 3), Each(pred("min_size?", 2)))


@dataclass
class Card:
    number: str
    expiry: str


@dataclass
class Cash:
    amount: float


class OrderLine(BaseModel):
    sku: str = Field(pattern=r"^[A-Z0-9]+$")
    quantity: int = Field(ge=1)


@dataclass
class Order:
    """A placed order."""

    id: int
    customer: CustomerContract
    payment: Union[Card, Cash]
    lines: List[OrderLine]
    notes: Optional[str] = None


def ref(name):
    return {"$ref": f"{REF_PREFIX}{name}"}


@pytest.mark.integration
class TestEndToEndGraphs:
    """End-to-end tests for mixed contract, model and union graphs."""

    def test_order_document(self):
        """Test the full document for a graph mixing every subject kind."""
        document = build_document(Order)

        assert set(document["definitions"]) == {
            "AddressContract",
            "Card",
            "Cash",
            "CustomerContract",
            "Order",
            "OrderLine",
        }

        order = document["schema"]
        assert order["description"] == "A placed order."
        assert order["required"] == ["id", "customer", "payment", "lines"]
        assert order["properties"]["customer"] == ref("CustomerContract")
        assert order["properties"]["payment"] == {"anyOf": [ref("Card"), ref("Cash")]}
        assert order["properties"]["lines"] == {"type": "array", "items": ref("OrderLine")}
        assert order["properties"]["notes"] == {"type": "string", "nullable": True}

    def test_contract_constraints(self):
        """Test that rule trees become constraints on contract properties."""
        customer = build_document(Order)["definitions"]["CustomerContract"]
        props = customer["properties"]

        assert customer["description"] == "A registered customer."
        assert customer["required"] == ["id", "email", "tier"]
        assert props["id"] == {"type": "integer", "minimum": 0, "exclusiveMinimum": True}
        assert props["email"] == {"type": "string", "format": "email"}
        assert props["tier"]["enum"] == ["free", "pro", "team"]
        assert props["address"] == ref("AddressContract")
        assert props["referrer"] == {"nullable": True, "anyOf": [ref("CustomerContract")]}
        assert props["nicknames"]["maxItems"] == 3
        assert props["nicknames"]["items"] == {"type": "string", "minLength": 2}

    def test_nested_definitions(self):
        """Test definitions reached only through other definitions."""
        definitions = build_document(Order)["definitions"]
        address = definitions["AddressContract"]["properties"]
        assert address["street"] == {"type": "string", "nullable": False}
        assert address["zip"]["pattern"] == r"^\d{5}$"

        line = definitions["OrderLine"]["properties"]
        assert line["sku"]["pattern"] == r"^[A-Z0-9]+$"
        assert line["quantity"] == {"type": "integer", "minimum": 1}

    def test_shared_cache_across_builds(self):
        """Test that one cache shares named nodes between top-level builds."""
        cache = {}
        order = build_schema(Order, cache=cache)
        customer = build_schema(CustomerContract, cache=cache)
        assert order.properties["customer"] is customer

    def test_separate_builds_share_nothing(self):
        """Test that builds without a shared cache produce distinct nodes."""
        assert build_schema(CustomerContract) is not build_schema(CustomerContract)

    def test_document_is_json_serializable(self):
        """Test that a document survives a JSON round trip."""
        document = build_document(Order)
        assert json.loads(json.dumps(document)) == document

    def test_arrow_schema_document(self):
        """Test a named Arrow schema end to end."""
        schema = pa.schema(
            [
                pa.field("id", pa.int64(), nullable=False),
                pa.field("events", pa.list_(pa.struct([pa.field("at", pa.date32())]))),
            ],
            metadata={"name": "activity"},
        )
        document = build_document(schema)
        assert set(document["definitions"]) == {"activity"}
        events = document["schema"]["properties"]["events"]
        assert events["items"]["properties"]["at"]["format"] == "date"

    def test_unbuildable_subject(self):
        """Test that a subject no handler accepts yields an empty document."""
        assert build_document(object()) == {"schema": None, "definitions": {}}


@pytest.mark.integration
class TestEndToEndCli:
    """End-to-end tests running the CLI against a model file."""

    def test_build_from_file(self, temp_dir):
        """Test building a graph from a file target."""
        models = temp_dir / "shop_models.py"
        models.write_text(
            "from dataclasses import dataclass, field\n"
            "from typing import List, Optional\n"
            "\n"
            "\n"
            "@dataclass\n"
            "class Category:\n"
            "    name: str\n"
            "    parent: Optional['Category'] = None\n"
            "    children: List['Category'] = field(default_factory=list)\n"
        )

        result = CliRunner().invoke(main, ["build", f"{models}:Category"])
        assert result.exit_code == 0, result.output

        document = json.loads(result.output)
        category = document["schema"]
        assert category["required"] == ["name"]
        assert category["properties"]["parent"] == {
            "nullable": True,
            "anyOf": [ref("Category")],
        }
        assert category["properties"]["children"]["items"] == ref("Category")
        assert list(document["definitions"]) == ["Category"]
