"""
Test suite for the derivation rule table and dependency resolver.

Tests cover:
- Attribute name parsing (symbols, aliases, member names)
- Rule table contents
- Memoization (each formula runs once per body)
- Missing rules and precomputed values
- Cycle detection
"""

import pytest
import numpy as np
from keplerbody import (
    OrbitalBody, Attr, Derivation, DERIVATIONS,
    MissingDerivationError, CyclicDependencyError
)
from keplerbody.derivations import parse_attr


MU = 398600.0

RVEC = [7000.0, 0.0, 0.0]
VVEC = [0.0, 7.5, 0.0]


def counting_rules(attr, calls):
    """Copy of DERIVATIONS whose rule for ``attr`` records each call."""
    original = DERIVATIONS[attr]

    def counted(body):
        calls.append(attr)
        return original.formula(body)

    rules = dict(DERIVATIONS)
    rules[attr] = Derivation(attr, original.requires, counted)
    return rules


class TestParseAttr:
    """Test conversion of names to Attr members."""

    def test_symbol(self):
        assert parse_attr('μ') is Attr.MU
        assert parse_attr('ε') is Attr.ENERGY
        assert parse_attr('ω') is Attr.ARGP
        assert parse_attr('Ω') is Attr.ANGULAR_VELOCITY

    def test_alias(self):
        assert parse_attr('mu') is Attr.MU
        assert parse_attr('energy') is Attr.ENERGY
        assert parse_attr('omega') is Attr.ARGP
        assert parse_attr('eccentricity') is Attr.ECC

    def test_member_name(self):
        assert parse_attr('ECC') is Attr.ECC
        assert parse_attr('period') is Attr.PERIOD

    def test_enum_passthrough(self):
        assert parse_attr(Attr.B) is Attr.B

    def test_unknown_name(self):
        with pytest.raises(MissingDerivationError) as excinfo:
            parse_attr('inclination')
        assert excinfo.value.name == 'inclination'

    def test_wrong_type(self):
        with pytest.raises(TypeError):
            parse_attr(3)


class TestRuleTable:
    """Test the shape of the default rule table."""

    def test_every_attr_has_rule(self):
        assert set(DERIVATIONS) == set(Attr)

    def test_leaf_rules_have_no_prerequisites(self):
        for attr in (Attr.R, Attr.V, Attr.MU, Attr.VT):
            assert DERIVATIONS[attr].requires == ()

    @pytest.mark.parametrize("attr,requires", [
        (Attr.EK, (Attr.V,)),
        (Attr.EP, (Attr.MU, Attr.R)),
        (Attr.ENERGY, (Attr.EK, Attr.EP)),
        (Attr.A, (Attr.MU, Attr.ENERGY)),
        (Attr.B, (Attr.A, Attr.ECC)),
        (Attr.ECC, (Attr.ENERGY, Attr.H, Attr.MU)),
        (Attr.ARGP, (Attr.ECCVEC,)),
    ])
    def test_prerequisites(self, attr, requires):
        assert DERIVATIONS[attr].requires == requires

    def test_prerequisites_are_known(self):
        for rule in DERIVATIONS.values():
            for req in rule.requires:
                assert req in DERIVATIONS

    def test_rule_doc(self):
        assert DERIVATIONS[Attr.EK].doc == "Kinetic energy v²/2"


class TestMemoization:
    """Test that derived values are computed exactly once."""

    def test_repeated_get_runs_formula_once(self):
        calls = []
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU,
                           rules=counting_rules(Attr.R, calls))
        first = body.get('r')
        second = body.get('r')
        assert first == second == 7000.0
        assert len(calls) == 1

    def test_shared_prerequisite_resolved_once(self):
        """μ is needed by ep, h, a and ecc but derived once."""
        calls = []
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU,
                           rules=counting_rules(Attr.MU, calls))
        body.get('ecc')
        body.get('a')
        body.get('p')
        assert len(calls) == 1

    def test_prerequisites_cached(self):
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU)
        body.get('a')
        for name in ('v', 'ek', 'r', 'μ', 'ep', 'ε'):
            assert body.is_cached(name)
        assert not body.is_cached('ecc')

    def test_require_returns_body(self):
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU)
        assert body.require(['a', 'ecc']) is body
        assert 'a' in body
        assert Attr.ECC in body.cache

    def test_cached_vectors_read_only(self):
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU)
        h = body.get('h')
        with pytest.raises(ValueError):
            h[0] = 1.0

    def test_precomputed_value_not_recomputed(self):
        calls = []
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU,
                           known={'r': 1234.0},
                           rules=counting_rules(Attr.R, calls))
        assert body.get('r') == 1234.0
        assert calls == []


class TestMissingDerivation:
    """Test failures for attributes without rules."""

    def test_empty_rule_table(self):
        body = OrbitalBody(RVEC, VVEC, mass=1.0, rules={})
        with pytest.raises(MissingDerivationError):
            body.get('r')

    def test_unknown_attribute(self):
        body = OrbitalBody(RVEC, VVEC, mass=1.0)
        with pytest.raises(MissingDerivationError):
            body.get('inclination')

    def test_missing_prerequisite_named(self):
        rules = {k: v for k, v in DERIVATIONS.items() if k is not Attr.R}
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU, rules=rules)
        with pytest.raises(MissingDerivationError) as excinfo:
            body.get('ep')
        assert excinfo.value.name == 'r'
        assert not body.is_cached('ep')

    def test_precomputed_value_fills_gap(self):
        rules = {k: v for k, v in DERIVATIONS.items() if k is not Attr.R}
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU, rules=rules,
                           known={Attr.R: 7000.0})
        assert body.get('ep') == pytest.approx(-MU / 7000.0)

    def test_is_lookup_error(self):
        body = OrbitalBody(RVEC, VVEC, mass=1.0, rules={})
        with pytest.raises(LookupError):
            body.get('v')


class TestCycleDetection:
    """Test that cyclic rule tables fail fast."""

    def test_two_step_cycle(self):
        rules = dict(DERIVATIONS)
        rules[Attr.R] = Derivation(Attr.R, (Attr.EP,), lambda body: 1.0)
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU, rules=rules)
        with pytest.raises(CyclicDependencyError) as excinfo:
            body.get('ep')
        assert excinfo.value.path == ['ep', 'r', 'ep']

    def test_self_cycle(self):
        rules = dict(DERIVATIONS)
        rules[Attr.V] = Derivation(Attr.V, (Attr.V,), lambda body: 1.0)
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU, rules=rules)
        with pytest.raises(CyclicDependencyError):
            body.get('ek')

    def test_body_usable_after_cycle(self):
        rules = dict(DERIVATIONS)
        rules[Attr.R] = Derivation(Attr.R, (Attr.EP,), lambda body: 1.0)
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU, rules=rules)
        with pytest.raises(CyclicDependencyError):
            body.get('ep')
        assert body.get('v') == pytest.approx(7.5)
        assert body.get('ek') == pytest.approx(7.5**2 / 2)

    def test_no_false_positive_on_diamond(self):
        """ε reaches μ through ep only, ecc reaches it three ways."""
        body = OrbitalBody(RVEC, VVEC, mass=1.0, mu=MU)
        assert np.isfinite(body.get('ecc'))
