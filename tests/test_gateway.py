import json
import sys
from pathlib import Path

import pytest
from sqlalchemy.exc import SQLAlchemyError

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cabinet.drawer import Drawer
from cabinet.layout import CabinetLayout
from cabinet_web import models
from cabinet_web.database import create_db_engine, init_db, session_scope
from cabinet_web.gateway import (
    DrawerGateway,
    MalformedDrawerError,
    PersistenceError,
    drawer_from_fields,
)


@pytest.fixture
def gateway(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'cabinet.db'}")
    init_db(engine)
    yield DrawerGateway(engine)
    engine.dispose()


def test_replace_and_load_roundtrip(gateway):
    layout, _ = CabinetLayout.default().resize("A1", "LARGE")
    layout = layout.update_details("A1", "Screws", ["M3", "M4"])
    assert gateway.replace_all(layout.records()) == 178
    assert gateway.count() == 178

    loaded = CabinetLayout.from_records(gateway.load_all(), repair=False)
    assert loaded == layout
    assert loaded.get("A1").keywords == ("M3", "M4")


def test_stored_row_uses_json_lists(gateway):
    gateway.replace_all([Drawer.create("A", 1, "MEDIUM", keywords=["x"])])
    with session_scope(gateway.engine) as session:
        row = session.get(models.DrawerRow, "A1")
        assert json.loads(row.positions) == [1, 2]
        assert json.loads(row.keywords) == ["x"]
        assert row.title == "A01,A02"
        assert row.spacing == 32


def test_malformed_rows_are_skipped(gateway):
    gateway.replace_all([Drawer.create("A", 1, "SMALL"), Drawer.create("A", 2, "SMALL")])
    with session_scope(gateway.engine) as session:
        row = session.get(models.DrawerRow, "A2")
        row.positions = "not json"
        session.add(row)
    assert [record.id for record in gateway.load_all()] == ["A1"]


def test_replace_all_is_atomic(gateway, monkeypatch):
    gateway.replace_all(CabinetLayout.default().records())

    def broken_add_all(self, rows):
        raise SQLAlchemyError("write failed")

    monkeypatch.setattr("sqlmodel.Session.add_all", broken_add_all)
    with pytest.raises(PersistenceError):
        gateway.replace_all([Drawer.create("A", 1, "LARGE")])
    monkeypatch.undo()
    assert gateway.count() == 180


def test_drawer_from_fields_validates_positions():
    drawer = drawer_from_fields("B10", "LARGE", "[10, 11]", keywords='["tape"]')
    assert drawer.title == "B10,B11"
    assert drawer.keywords == ("tape",)
    with pytest.raises(MalformedDrawerError):
        drawer_from_fields("B10", "LARGE", "[10]")
    with pytest.raises(MalformedDrawerError):
        drawer_from_fields("A8", "LARGE", [8, 9, 10])
    with pytest.raises(MalformedDrawerError):
        drawer_from_fields("A1", "SMALL", [1], keywords="{}")
    with pytest.raises(MalformedDrawerError):
        drawer_from_fields("A1", "SMALL", [True])


def test_printer_config_defaults_and_update(gateway):
    config = gateway.get_printer_config()
    assert config == {
        "name": "Default Printer",
        "host": "localhost",
        "port": 631,
        "queue_name": "",
        "virtual_printing": False,
    }
    updated = gateway.save_printer_config(queue_name="labels", virtual_printing=True, host=None)
    assert updated["queue_name"] == "labels"
    assert updated["virtual_printing"] is True
    assert updated["host"] == "localhost"
    assert gateway.get_printer_config() == updated
    with pytest.raises(ValueError):
        gateway.save_printer_config(colour="red")
