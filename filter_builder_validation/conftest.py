from __future__ import annotations

import logging

import pytest

from filter_builder.contracts.filters import FilterState
from filter_builder.util.logging import ROOT_LOGGER
from filter_builder_validation.stubs import SequentialIds, group, state, text_filter


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture(autouse=True)
def detach_log_handlers():
    # The CLI attaches a stream handler bound to CliRunner's temporary stderr.
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def flat_state() -> FilterState:
    return state(
        text_filter("a", key="firstName", value="Jane"),
        text_filter("b", key="lastName", value="Doe"),
        text_filter("c", key="city", value="Paris"),
    )


@pytest.fixture()
def nested_state() -> FilterState:
    # a, g1(b, g2(c, d)), e
    return state(
        text_filter("a"),
        group(
            "g1",
            text_filter("b"),
            group("g2", text_filter("c"), text_filter("d")),
        ),
        text_filter("e"),
    )


@pytest.fixture()
def deepest_state() -> FilterState:
    # Three levels of groups: leaves x, y sit at depth 3.
    return state(
        group(
            "g1",
            group(
                "g2",
                group("g3", text_filter("x"), text_filter("y")),
            ),
        ),
        text_filter("z"),
    )
