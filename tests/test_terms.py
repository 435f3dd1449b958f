# tests/test_terms.py
from export.terms import resolve_terms


class _Provider:
    def __init__(self, terms):
        self.terms = terms
        self.called = False

    def current_terms(self):
        self.called = True
        return self.terms


def test_configured_terms_used_verbatim():
    provider = _Provider(["IGNORED"])
    assert resolve_terms(["FA24", "SP25", "FA24"], provider) == ["FA24", "SP25", "FA24"]
    assert provider.called is False


def test_current_terms_are_deduplicated():
    provider = _Provider(["FA24", "SU24", "FA24"])
    assert resolve_terms([], provider) == ["FA24", "SU24"]
    assert provider.called is True


def test_current_terms_from_a_set():
    assert resolve_terms(None, _Provider({"FA24"})) == ["FA24"]


def test_no_current_terms_gives_empty_list_not_none():
    result = resolve_terms([], _Provider([]))
    assert result == []
    assert isinstance(result, list)


def test_provider_returning_none_still_gives_empty_list():
    assert resolve_terms(None, _Provider(None)) == []
