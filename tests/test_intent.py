import pytest

from bridge.intent import CATEGORIES, MIN_CASE_CONFIDENCE, infer_intent


class TestInferIntent:

    def test_gastric_example(self):
        intent = infer_intent("My stomach hurts and I have acidity")
        assert intent.category == "gastric"
        assert intent.symptoms == ["stomach", "acidity"]
        assert intent.confidence == 50
        assert intent.is_actionable

    @pytest.mark.parametrize("message", ["", None])
    def test_empty(self, message):
        intent = infer_intent(message)
        assert intent.as_dict() == {"category": "general", "symptoms": [], "confidence": 0}
        assert not intent.is_actionable

    def test_no_keywords(self):
        intent = infer_intent("Just wanted to say thanks")
        assert intent.category == "general"
        assert intent.confidence < MIN_CASE_CONFIDENCE

    def test_tie_keeps_declared_order(self):
        # one cardiac hit, one pain hit: cardiac is declared first
        intent = infer_intent("chest pain")
        assert intent.category == "cardiac"
        assert CATEGORIES.index("cardiac") < CATEGORIES.index("pain")

    def test_most_matches_wins(self):
        intent = infer_intent("Cough, sore throat and fever, plus a rash")
        assert intent.category == "respiratory"
        assert intent.confidence == 100

    def test_overlapping_keywords_count_towards_confidence(self):
        intent = infer_intent("bad headache")
        assert intent.symptoms == ["ache", "headache"]
        assert intent.confidence == 50

    def test_case_insensitive(self):
        assert infer_intent("INSOMNIA and STRESS").category == "stress"
