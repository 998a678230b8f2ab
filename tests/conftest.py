# tests/conftest.py
import pytest

from slotledger.api.accumulator import AccumulatorModel
from slotledger.runtime.context import Context


@pytest.fixture
def ctx():
    """A fresh session per test, torn down afterwards."""
    context = Context()
    yield context
    context.terminate()


@pytest.fixture
def chain(ctx):
    return ctx.chain


@pytest.fixture
def accounts(ctx):
    return ctx.accounts


@pytest.fixture
def accumulator(ctx) -> AccumulatorModel:
    return ctx.models.get(AccumulatorModel)


@pytest.fixture
def initialized(ctx, chain, accumulator):
    """Mine the initialize transaction in its own block."""
    chain.mine_block([accumulator.initialize(ctx.deployer)])
    return ctx

