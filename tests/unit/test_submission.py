import pytest

from src.forms.submission import MalformedSubmissionError, RawSubmission


class TestRawSubmissionParse:
    def test_empty_body(self):
        assert RawSubmission(content_type="application/json", body=b"").parse() == {}

    def test_json_object(self):
        submission = RawSubmission(content_type="application/json; charset=utf-8", body=b'{"quantity": 3}')

        assert submission.parse() == {"quantity": 3}

    def test_vendor_json_media_type(self):
        submission = RawSubmission(content_type="application/merge-patch+json", body=b'{"quantity": 3}')

        assert submission.is_json
        assert submission.parse() == {"quantity": 3}

    def test_invalid_json(self):
        submission = RawSubmission(content_type="application/json", body=b"{oops")

        with pytest.raises(MalformedSubmissionError, match="not valid JSON"):
            submission.parse()

    def test_json_must_be_an_object(self):
        submission = RawSubmission(content_type="application/json", body=b"[1, 2]")

        with pytest.raises(MalformedSubmissionError, match="JSON object"):
            submission.parse()

    def test_form_encoded_flat(self):
        submission = RawSubmission(
            content_type="application/x-www-form-urlencoded",
            body=b"reference=A%20B&quantity=",
        )

        assert submission.parse() == {"reference": "A B", "quantity": ""}

    def test_form_encoded_nested(self):
        submission = RawSubmission(
            content_type="application/x-www-form-urlencoded",
            body=b"combination_item[quantity]=3&combination_item[reference]=X",
        )

        assert submission.parse() == {"combination_item": {"quantity": "3", "reference": "X"}}

    @pytest.mark.parametrize(
        "body",
        [
            b"combination_item=1&combination_item[quantity]=3",
            b"combination_item[quantity]=3&combination_item=1",
        ],
    )
    def test_form_encoded_conflicting_keys(self, body: bytes):
        submission = RawSubmission(body=body)

        with pytest.raises(MalformedSubmissionError, match="Conflicting"):
            submission.parse()

    def test_invalid_utf8(self):
        with pytest.raises(MalformedSubmissionError, match="UTF-8"):
            RawSubmission(content_type="application/json", body=b"\xff\xfe").parse()
