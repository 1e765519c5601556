from datetime import datetime, timezone

import pytest

from gastos.models.event import Event, Participant
from gastos.services.recurrence import (
    add_months,
    build_next_event,
    next_month_title,
    next_period,
    period_of,
)


@pytest.mark.parametrize("title,expected", [
    ("Alquiler Enero", "Alquiler Febrero"),
    ("Expensas marzo 2025", "Expensas abril 2025"),
    ("LUZ AGOSTO", "LUZ SEPTIEMBRE"),
    ("Cuota diciembre", "Cuota enero"),
    ("Gas setiembre", "Gas octubre"),
    ("Junio y julio", "Julio y julio"),
])
def test_next_month_title(title, expected):
    assert next_month_title(title) == expected


@pytest.mark.parametrize("title", ["Internet", "Mayonesa y pan", "", "Supermercado"])
def test_titles_without_a_month_are_kept(title):
    assert next_month_title(title) == title


@pytest.mark.parametrize("value,expected", [
    (datetime(2025, 1, 31), datetime(2025, 2, 28)),
    (datetime(2024, 1, 31), datetime(2024, 2, 29)),
    (datetime(2025, 3, 31), datetime(2025, 4, 30)),
    (datetime(2025, 12, 15, 10, 30), datetime(2026, 1, 15, 10, 30)),
])
def test_add_months_clamps_day(value, expected):
    assert add_months(value) == expected


def test_periods():
    assert period_of(datetime(2025, 7, 3)) == "2025-07"
    assert next_period("2025-12") == "2026-01"
    assert next_period("2025-01") == "2025-02"


def test_build_next_event_copies_the_split():
    original = Event(
        titulo="Alquiler Noviembre",
        moneda="USD",
        monto=900.0,
        repeticion="mensual",
        estado="cerrado",
        forma_pago="transferencia",
        vence_el=datetime(2025, 11, 30, tzinfo=timezone.utc),
        creado_por="u1",
        creado_en=datetime(2025, 11, 1, tzinfo=timezone.utc),
        quien_pago="u2",
        participantes=[
            Participant(uid="u1", alias="Ana", participacion=0.5),
            Participant(uid="u2", alias="Beto", participacion=0.5),
        ],
        participantes_uids=["u1", "u2"],
        token_invitacion="viejo",
        pagos={"u2": True},
        periodo="2025-11",
        liquidado=True,
        version=3
    )
    now = datetime(2025, 12, 1, tzinfo=timezone.utc)

    successor = build_next_event(original, now, "nuevo")

    assert successor.id != original.id
    assert successor.titulo == "Alquiler Diciembre"
    assert successor.estado == "abierto"
    assert successor.quien_pago is None
    assert successor.pagos == {}
    assert successor.liquidado is False
    assert successor.version == 1
    assert successor.periodo == "2025-12"
    assert successor.vence_el == datetime(2025, 12, 30, tzinfo=timezone.utc)
    assert successor.token_invitacion == "nuevo"
    assert successor.creado_en == now
    assert [(p.uid, p.participacion) for p in successor.participantes] == [("u1", 0.5), ("u2", 0.5)]


def test_period_falls_back_to_creation_month():
    original = Event(
        titulo="Gimnasio",
        moneda="ARS",
        monto=10.0,
        repeticion="mensual",
        estado="cerrado",
        creado_por="u1",
        creado_en=datetime(2025, 5, 20, tzinfo=timezone.utc),
        token_invitacion="t"
    )

    successor = build_next_event(original, datetime(2025, 6, 1, tzinfo=timezone.utc), "t2")

    assert successor.titulo == "Gimnasio"
    assert successor.periodo == "2025-06"
    assert successor.vence_el is None
