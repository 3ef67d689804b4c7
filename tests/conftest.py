import copy
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from ordertrack.application import reset_order_state
from ordertrack.core.aggregate import build_collection

ORDER_PANDA = [
    {
        "jobno_oms": "X999",
        "finaldelvdate": "N/A",
        "punit_sh": "U2",
        "buyer_sh": "ZARA",
        "mainimagepath": "https://img.example/x999.jpg",
        "quantity": 300,
        "u46": None,
    },
    {
        "jobno_oms": "J050",
        "finaldelvdate": "2024-01-15",
        "punit_sh": "U1",
        "buyer_sh": "H&M",
        "mainimagepath": "",
        "quantity": 150,
        "u46": "U46-A",
    },
    {
        "jobno_oms": "H100",
        "finaldelvdate": "2024-03-01",
        "punit_sh": "U1",
        "buyer_sh": "NEXT",
        "mainimagepath": None,
        "quantity": 100,
        "u46": "U46-B",
    },
    {
        "jobno_oms": "H200",
        "finaldelvdate": "15-02-2024",
        "punit_sh": "U2",
        "buyer_sh": "ZARA",
        "mainimagepath": "https://img.example/h200.jpg",
        "quantity": 200.0,
    },
    {"jobno_oms": None, "pono": "PO-ORPHAN"},
]

SAMPLE_PAYLOADS = {
    "order_panda": ORDER_PANDA,
    "ordmatpen": [
        {"orderno": "J050", "material": "Blue Cotton"},
        {"orderno": "J050", "material": "Red Wool"},
    ],
    "accessory": [],
    "Allotpen": [{"jobno_oms": "H100", "yarn": "30s Combed"}],
    "knitst": {"orderno": "H200", "status": "Knitting"},
    "Fabst": [{"jobno_fabric_status": "X999", "fabric": "Single Jersey"}],
    "Fabyarn": [],
}


def sample_payloads() -> dict:
    return copy.deepcopy(SAMPLE_PAYLOADS)


@pytest.fixture()
def payloads() -> dict:
    return sample_payloads()


@pytest.fixture()
def records(payloads):
    return build_collection(payloads)


@pytest.fixture(autouse=True)
def reset_state():
    reset_order_state()
    yield
    reset_order_state()
