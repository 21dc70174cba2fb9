import unittest

import httpx

from tribune.enrichment import (
    ExtractionResult,
    TextExtractor,
    create_extractive_summary,
    create_medium_summary,
    create_short_summary,
    validate_extracted_text,
)
from tribune.enrichment.summarizer import split_into_sentences
from tribune.enrichment.text_extractor import extract_paragraphs, is_junk_paragraph

PARAGRAPHS = [
    "The regional water authority said on Tuesday that reservoir levels had recovered "
    "to their highest point in six years after a wet winter across the valley.",
    "Engineers had warned last summer that two of the largest reservoirs were close to "
    "their minimum operating levels, prompting temporary limits on garden watering.",
    "Officials expect the restrictions to be lifted fully before the start of the "
    "holiday season, although they urged residents to keep conserving where they can.",
]

PAGE = """
<html>
<head><title>Reservoirs recover</title><script>var tracking = 1;</script></head>
<body>
  <nav><p>Home | World | Politics | Business | Technology | Science | Health | Sport</p></nav>
  <article>
    <h1>Reservoirs recover after wet winter</h1>
    <p>{0}</p>
    <p>Short caption.</p>
    <p>{1}</p>
    <p>Subscribe to our daily briefing and never miss the stories that matter to you.</p>
    <p>{2}</p>
  </article>
  <footer><p>Copyright notice for the example publication and all of its affiliates.</p></footer>
</body>
</html>
""".format(*PARAGRAPHS)


class TestExtractParagraphs(unittest.TestCase):
    def test_content_paragraphs_only(self):
        self.assertEqual(extract_paragraphs(PAGE), PARAGRAPHS)

    def test_falls_back_to_body(self):
        html = "<html><body><div><p>{0}</p><p>{1}</p></div></body></html>".format(*PARAGRAPHS)
        self.assertEqual(extract_paragraphs(html), PARAGRAPHS[:2])

    def test_junk_paragraphs(self):
        self.assertTrue(is_junk_paragraph("Share this article with your friends and family today"))
        self.assertTrue(is_junk_paragraph("Read our cookie policy for more details on tracking"))
        self.assertTrue(is_junk_paragraph("There are 42 comments on this story so far"))
        self.assertFalse(is_junk_paragraph(PARAGRAPHS[0]))


class TestTextExtractor(unittest.IsolatedAsyncioTestCase):
    async def test_extracts_page(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text=PAGE))
        result = await TextExtractor(transport=transport).extract("https://news.example.com/reservoirs")

        self.assertTrue(result.success)
        self.assertEqual(result.paragraphs, PARAGRAPHS)
        self.assertEqual(result.full_text, "\n\n".join(PARAGRAPHS))
        self.assertEqual(result.word_count, len(" ".join(PARAGRAPHS).split()))
        self.assertTrue(validate_extracted_text(result))

    async def test_http_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(403))
        result = await TextExtractor(transport=transport).extract("https://news.example.com/x")

        self.assertFalse(result.success)
        self.assertEqual(result.error, "HTTP 403")
        self.assertFalse(validate_extracted_text(result))


class TestValidateExtractedText(unittest.TestCase):
    def test_single_paragraph_is_not_enough(self):
        text = " ".join(["word"] * 80)
        result = ExtractionResult(url="u", success=True, full_text=text, paragraphs=[text], word_count=80)
        self.assertFalse(validate_extracted_text(result))

    def test_too_few_words(self):
        result = ExtractionResult(
            url="u", success=True, full_text="a b\n\nc d", paragraphs=["a b", "c d"], word_count=4
        )
        self.assertFalse(validate_extracted_text(result))


class TestSummarizer(unittest.TestCase):
    def test_abbreviations_do_not_split(self):
        text = (
            "Dr. Smith announced a new treatment for the disease today. "
            "The trial included more than four hundred patients. Short one."
        )
        self.assertEqual(
            split_into_sentences(text),
            [
                "Dr. Smith announced a new treatment for the disease today.",
                "The trial included more than four hundred patients.",
            ],
        )

    def test_grows_to_min_length(self):
        text = (
            "The council approved the new budget on Monday. "
            "Spending on public transit will rise next year. "
            "Officials expect construction to begin in spring. "
            "Residents can comment on the plan until March."
        )
        result = create_extractive_summary(text, sentence_count=2, max_length=300, min_length=100)

        self.assertTrue(result.success)
        self.assertEqual(len(result.sentences), 3)
        self.assertEqual(result.method, "extractive")
        self.assertTrue(result.summary.startswith("The council approved"))

    def test_truncates_to_max_length(self):
        text = " ".join(PARAGRAPHS)
        result = create_extractive_summary(text, sentence_count=3, max_length=120, min_length=50)
        self.assertTrue(result.success)
        self.assertLessEqual(len(result.summary), 123)

    def test_no_text(self):
        self.assertFalse(create_extractive_summary("").success)
        self.assertFalse(create_extractive_summary("Too short. Tiny.").success)

    def test_presets(self):
        text = " ".join(PARAGRAPHS)
        self.assertLessEqual(len(create_short_summary(text).summary), 203)
        self.assertLessEqual(len(create_medium_summary(text).summary), 303)


if __name__ == "__main__":
    unittest.main()
