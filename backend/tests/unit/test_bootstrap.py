"""Process-wide singletons wired by pulse.wiring.bootstrap."""
from pulse.domain.concepts.models import ConceptKind
from pulse.wiring import bootstrap


def test_factories_return_the_same_instances():
    assert bootstrap.get_tag_cache() is bootstrap.get_tag_cache()
    assert bootstrap.get_theme_cache() is bootstrap.get_theme_cache()
    assert bootstrap.get_signal_type_cache() is bootstrap.get_signal_type_cache()
    assert bootstrap.get_canonical_normalizer() is bootstrap.get_canonical_normalizer()


def test_caches_are_bound_to_their_kind():
    assert bootstrap.get_tag_cache().kind == ConceptKind.TAG
    assert bootstrap.get_theme_cache().kind == ConceptKind.THEME


def test_reset_singletons_builds_fresh_instances():
    before = bootstrap.get_theme_cache()

    bootstrap.reset_singletons()

    assert bootstrap.get_theme_cache() is not before
