import unittest
from io import BytesIO

from pypdf import PdfReader

from metadata_api.services.document import PdfDocument
from metadata_api.services.provenance import ProvenanceConfig, stamp_provenance
from tests.pdf_factory import build_pdf

CONFIG = ProvenanceConfig(
    producer_name="Test Producer",
    creator_name="Test Creator",
    comment_text="stamped in tests",
    title="Branded",
)


class TestStampProvenance(unittest.TestCase):
    def test_creates_info_dictionary_when_absent(self):
        document = PdfDocument.load(build_pdf())
        stamp_provenance(document, CONFIG)
        info = PdfReader(BytesIO(document.save())).metadata
        self.assertEqual(info.producer, "Test Producer")
        self.assertEqual(info.creator, "Test Creator")
        self.assertEqual(info.title, "Branded")
        self.assertEqual(info["/Comments"], "stamped in tests")

    def test_overrides_existing_values(self):
        document = PdfDocument.load(build_pdf(info={"Title": "Mine", "Producer": "Other", "Author": "Me"}))
        stamp_provenance(document, CONFIG)
        info = PdfReader(BytesIO(document.save())).metadata
        self.assertEqual(info.title, "Branded")
        self.assertEqual(info.producer, "Test Producer")
        self.assertEqual(info.author, "Me")


if __name__ == "__main__":
    unittest.main()
