try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import io
import json
import logging

import pytest

from _fakes import JOB_UUID
from analytics.core.errors import InvalidObjectKey, MalformedDocument
from analytics.schemas import EntitiesResult, KeyPhrasesResult, SentimentResult
from analytics.services.kinds import ENTITIES, KEY_PHRASES, SENTIMENT
from analytics.services.result_decoder import ResultDecoder, job_id_from_key

KEY_PHRASES_KEY = "keyPhrases/job-123/out.json"
ENTITIES_KEY = "entities/job-456/output/output.tar.gz"
SENTIMENT_KEY = "sentiment/123456789012-SENTIMENT-abc/output/output.tar.gz"


def _stream(document) -> io.BytesIO:
    if isinstance(document, bytes):
        return io.BytesIO(document)
    return io.BytesIO(json.dumps(document).encode("utf-8"))


def _sentiment_document(**overrides) -> dict:
    document = {
        "Sentiment": "POSITIVE",
        "File": f"{JOB_UUID}-transcript.txt",
        "Line": 0,
        "SentimentScore": {
            "Mixed": 0.01,
            "Negative": 0.02,
            "Neutral": 0.07,
            "Positive": 0.90,
        },
    }
    document.update(overrides)
    return document


def test_job_id_is_second_key_segment() -> None:
    assert job_id_from_key("keyPhrases/job-123/out.json") == "job-123"
    assert job_id_from_key("entities/abc/output/output.tar.gz") == "abc"


@pytest.mark.parametrize("key", ["keyPhrases/job-123", "keyPhrases//out.json", "keyPhrases"])
def test_job_id_requires_a_nested_key(key: str) -> None:
    with pytest.raises(InvalidObjectKey):
        job_id_from_key(key)


@pytest.mark.parametrize("count", [0, 1, 5])
def test_key_phrases_keep_every_phrase(count: int) -> None:
    phrases = [{"Text": f"phrase {i}", "Score": i / 10} for i in range(count)]

    record = ResultDecoder().decode(
        _stream({"KeyPhrases": phrases}), KEY_PHRASES, KEY_PHRASES_KEY
    )

    assert isinstance(record, KeyPhrasesResult)
    assert record.job_id == "job-123"
    assert [phrase.text for phrase in record.key_phrases] == [p["Text"] for p in phrases]
    assert [phrase.score for phrase in record.key_phrases] == [p["Score"] for p in phrases]


@pytest.mark.parametrize("document", [{}, {"KeyPhrases": None}, {"KeyPhrases": "n/a"}])
def test_missing_phrases_are_an_empty_result(document: dict, caplog) -> None:
    with caplog.at_level(logging.INFO):
        record = ResultDecoder().decode(_stream(document), KEY_PHRASES, KEY_PHRASES_KEY)

    assert record.key_phrases == []
    assert "No phrases found." in caplog.text


def test_phrase_without_score_is_malformed() -> None:
    with pytest.raises(MalformedDocument) as excinfo:
        ResultDecoder().decode(
            _stream({"KeyPhrases": [{"Text": "hello"}]}), KEY_PHRASES, KEY_PHRASES_KEY
        )

    assert excinfo.value.object_key == KEY_PHRASES_KEY
    assert "Score" in str(excinfo.value)


def test_sentiment_job_id_comes_from_file_name() -> None:
    record = ResultDecoder().decode(
        _stream(_sentiment_document()), SENTIMENT, SENTIMENT_KEY
    )

    assert isinstance(record, SentimentResult)
    assert record.job_id == JOB_UUID
    assert len(record.job_id) == 36
    assert record.sentiment == "POSITIVE"
    assert record.sentiment_score.positive == pytest.approx(0.90)
    assert record.sentiment_score.mixed == pytest.approx(0.01)


@pytest.mark.parametrize(
    "overrides",
    [
        {"Sentiment": None},
        {"Sentiment": "ECSTATIC"},
        {"File": None},
        {"File": "too-short"},
        {"SentimentScore": {"Mixed": 0.5, "Negative": 0.5}},
    ],
)
def test_sentiment_requires_its_fields(overrides: dict) -> None:
    document = {k: v for k, v in _sentiment_document(**overrides).items() if v is not None}

    with pytest.raises(MalformedDocument):
        ResultDecoder().decode(_stream(document), SENTIMENT, SENTIMENT_KEY)


def test_entities_keep_type_text_and_score() -> None:
    document = {
        "Entities": [
            {"Text": "Jane", "Type": "PERSON", "Score": 0.99, "BeginOffset": 0, "EndOffset": 4},
            {"Text": "Lisbon", "Type": "LOCATION", "Score": 0.87},
        ]
    }

    record = ResultDecoder().decode(_stream(document), ENTITIES, ENTITIES_KEY)

    assert isinstance(record, EntitiesResult)
    assert record.job_id == "job-456"
    assert [(e.type, e.text, e.score) for e in record.entities] == [
        ("PERSON", "Jane", 0.99),
        ("LOCATION", "Lisbon", 0.87),
    ]


def test_entity_without_type_is_malformed() -> None:
    with pytest.raises(MalformedDocument):
        ResultDecoder().decode(
            _stream({"Entities": [{"Text": "Jane", "Score": 0.9}]}), ENTITIES, ENTITIES_KEY
        )


def test_only_first_json_line_is_decoded() -> None:
    lines = b"\n".join(
        json.dumps({"Line": i, "KeyPhrases": [{"Text": f"line {i}", "Score": 0.5}]}).encode()
        for i in range(3)
    )

    record = ResultDecoder().decode(_stream(lines), KEY_PHRASES, KEY_PHRASES_KEY)

    assert [phrase.text for phrase in record.key_phrases] == ["line 0"]


@pytest.mark.parametrize("payload", [b"", b"not json", b"[1, 2, 3]", b"\xff\xfe\x00"])
def test_unreadable_documents_are_malformed(payload: bytes) -> None:
    with pytest.raises(MalformedDocument):
        ResultDecoder().decode(_stream(payload), KEY_PHRASES, KEY_PHRASES_KEY)


def test_key_without_job_id_fails_before_validation() -> None:
    with pytest.raises(InvalidObjectKey):
        ResultDecoder().decode(_stream({"KeyPhrases": []}), KEY_PHRASES, "keyPhrases/out.json")


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
@pytest.mark.parametrize(
    "template, kind, key",
    [
        ('{"KeyPhrases": [{"Text": "a", "Score": %s}]}', KEY_PHRASES, KEY_PHRASES_KEY),
        ('{"Entities": [{"Text": "a", "Type": "PERSON", "Score": %s}]}', ENTITIES, ENTITIES_KEY),
        (
            '{"Sentiment": "MIXED", "File": "' + JOB_UUID + '", "SentimentScore": '
            '{"Mixed": %s, "Negative": 0.1, "Neutral": 0.1, "Positive": 0.1}}',
            SENTIMENT,
            SENTIMENT_KEY,
        ),
    ],
)
def test_non_finite_scores_are_malformed(token: str, template: str, kind, key: str) -> None:
    payload = (template % token).encode("utf-8")

    with pytest.raises(MalformedDocument):
        ResultDecoder().decode(_stream(payload), kind, key)
