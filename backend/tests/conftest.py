"""Shared MEPS-shaped tables for the linkage tests.

Three persons. P1 has one headache condition (C1) linked to office visit E1
and inpatient stay S1. P2 has two headache conditions (C2, C3) both linked
to E1, but E1 is P1's visit, so nothing of P2's is attributed; P2's own
visit E2 is not linked at all. P3 has an unrelated condition and an
unlinked inpatient stay.
"""
import pandas as pd
import pytest

TARGET = "NVS010"


@pytest.fixture
def cohort():
    return pd.DataFrame({
        "dupersid": ["P1", "P2", "P3"],
        "varstr": [1, 1, 2],
        "varpsu": [1, 2, 1],
        "perwt": [1000.0, 2000.0, 1500.0],
        "totexp": [2600.0, 300.0, 5200.0],
        "obvexp": [100.0, 50.0, 0.0],
        "optexp": [0.0, 0.0, 0.0],
        "ertexp": [0.0, 0.0, 0.0],
        "iptexp": [2000.0, 0.0, 5000.0],
        "ipngtd": [3.0, 0.0, 2.0],
    })


@pytest.fixture
def conditions():
    return pd.DataFrame({
        "dupersid": ["P1", "P2", "P2", "P3"],
        "condidx": ["C1", "C2", "C3", "C4"],
        "ccsr1x": ["NVS010", "NVS010", "CIR007", "CIR007"],
        "ccsr2x": ["", "", "NVS010", None],
        "ccsr3x": ["", None, "", ""],
    })


@pytest.fixture
def link():
    return pd.DataFrame({
        "dupersid": ["P1", "P2", "P2", "P1", "P3"],
        "condidx": ["C1", "C2", "C3", "C1", "C4"],
        "evntidx": ["E1", "E1", "E1", "S1", "S2"],
        "eventype": [1, 1, 1, 4, 4],
    })


@pytest.fixture
def ob_events():
    return pd.DataFrame({
        "dupersid": ["P1", "P2"],
        "evntidx": ["E1", "E2"],
        "obxp": [100.0, 50.0],
    })


@pytest.fixture
def ip_events():
    return pd.DataFrame({
        "dupersid": ["P1", "P3"],
        "evntidx": ["S1", "S2"],
        "ipxp": [2000.0, 5000.0],
        "numnighx": [3.0, 2.0],
    })


@pytest.fixture
def tables(cohort, conditions, link, ob_events, ip_events):
    return {
        "cohort": cohort,
        "conditions": conditions,
        "link": link,
        "ob": ob_events,
        "ip": ip_events,
    }
