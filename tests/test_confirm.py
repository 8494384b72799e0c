from collections import OrderedDict

import click
import pytest

from swap_deployment import confirm
from swap_deployment.constants import ZERO_ADDRESS
from tests.conftest import DEPLOYER


@pytest.fixture
def prompts(monkeypatch):
    asked = list()

    def fake_confirm(text, default=False, abort=False):
        asked.append(text)
        return True

    monkeypatch.setattr(confirm.click, "confirm", fake_confirm)
    return asked


def test_confirm_resolution(prompts, capsys):
    confirm.confirm_resolution("SAED", OrderedDict(owner=DEPLOYER))
    assert f"owner={DEPLOYER}" in capsys.readouterr().out
    assert prompts == ["Deploy SAED?"]


def test_zero_address_needs_extra_confirmation(prompts):
    confirm.confirm_resolution("SAEDSwap", OrderedDict(tokens=[DEPLOYER, ZERO_ADDRESS]))
    assert len(prompts) == 2
    assert "Zero Address" in prompts[1]


def test_no_parameters(prompts, capsys):
    confirm.confirm_resolution("Registry", OrderedDict())
    assert "No constructor parameters for Registry" in capsys.readouterr().out


def test_declined_deployment_aborts(monkeypatch):
    def decline(text, default=False, abort=False):
        raise click.Abort()

    monkeypatch.setattr(confirm.click, "confirm", decline)
    with pytest.raises(click.Abort):
        confirm.confirm_resolution("SAED", OrderedDict(owner=DEPLOYER))
