import unittest
from io import BytesIO
from unittest.mock import patch

from pypdf import PdfReader
from pypdf.generic import ByteStringObject, DictionaryObject, NameObject

from metadata_api.core.errors import InvalidDate
from metadata_api.models import MetadataFields
from metadata_api.services.document import PdfDocument
from metadata_api.services.metadata_service import read_metadata, write_metadata
from tests.pdf_factory import build_pdf


def _read(data: bytes) -> dict:
    return read_metadata(PdfDocument.load(data), data)


class TestReadMetadata(unittest.TestCase):
    def test_document_without_info_dictionary(self):
        data = build_pdf(version="1.7")
        result = _read(data)
        self.assertEqual(result["metadata"], {})
        self.assertEqual(result["customFields"], {})
        self.assertEqual(
            result["technical"],
            {
                "pageCount": 1,
                "fileSizeKB": f"{len(data) / 1024:.2f}",
                "pdfVersion": "1.7",
                "pageSize": "612.00x792.00",
            },
        )

    def test_document_without_pages(self):
        result = _read(build_pdf(pages=[]))
        self.assertEqual(result["technical"]["pageCount"], 0)
        self.assertEqual(result["technical"]["pageSize"], "Unknown")

    def test_primary_and_custom_fields(self):
        data = build_pdf(
            info={
                "Title": "Quarterly",
                "Author": "Finance",
                "Keywords": "q1 report",
                "CreationDate": "D:20230615120000",
                "ModDate": "D:20230616083000Z",
                "Company": "ACME",
                "Category": "Reports",
                "Manager": "",
            }
        )
        result = _read(data)
        self.assertEqual(result["metadata"]["title"], "Quarterly")
        self.assertEqual(result["metadata"]["author"], "Finance")
        self.assertEqual(result["metadata"]["keywords"], "q1 report")
        self.assertEqual(result["metadata"]["creationDate"], "2023-06-15T12:00:00.000Z")
        self.assertEqual(result["metadata"]["modificationDate"], "2023-06-16T08:30:00.000Z")
        self.assertNotIn("subject", result["metadata"])
        self.assertEqual(result["customFields"], {"company": "ACME", "category": "Reports"})

    def test_unparseable_date_is_dropped(self):
        result = _read(build_pdf(info={"CreationDate": "last tuesday"}))
        self.assertNotIn("creationDate", result["metadata"])

    def test_dangling_info_reference_is_tolerated(self):
        data = build_pdf().replace(b"/Root 1 0 R", b"/Root 1 0 R /Info 99 0 R")
        result = _read(data)
        self.assertEqual(result["metadata"], {})
        self.assertEqual(result["customFields"], {})


class TestRawLookup(unittest.TestCase):
    def test_byte_strings_are_decoded(self):
        document = PdfDocument.load(build_pdf())
        info = DictionaryObject({NameObject("/Company"): ByteStringObject(b"Soci\xe9t\xe9 \x80")})
        with patch.object(PdfDocument, "info_dict", return_value=info):
            self.assertEqual(document.lookup("Company"), "Soci\xe9t\xe9 \x80")
            self.assertEqual(read_metadata(document, b"")["customFields"], {"company": "Soci\xe9t\xe9 \x80"})


class TestWriteMetadata(unittest.TestCase):
    def _write(self, data: bytes, **fields) -> bytes:
        document = PdfDocument.load(data)
        write_metadata(document, MetadataFields(**fields))
        return document.save()

    def test_round_trip(self):
        output = self._write(
            build_pdf(),
            title="Report Q1",
            author="  Jane  ",
            keywords="alpha, beta ,, gamma",
            creationDate="2024-01-02T03:04:05Z",
        )
        metadata = _read(output)["metadata"]
        self.assertEqual(metadata["title"], "Report Q1")
        self.assertEqual(metadata["author"], "Jane")
        self.assertEqual(metadata["keywords"], "alpha beta gamma")
        self.assertEqual(metadata["creationDate"], "2024-01-02T03:04:05.000Z")

    def test_absent_fields_are_left_untouched(self):
        output = self._write(build_pdf(info={"Title": "Old", "Subject": "Kept"}), title="New", subject="   ")
        info = PdfReader(BytesIO(output)).metadata
        self.assertEqual(info.title, "New")
        self.assertEqual(info.subject, "Kept")

    def test_invalid_date_is_rejected_before_writing(self):
        document = PdfDocument.load(build_pdf(info={"Title": "Old"}))
        with self.assertRaises(InvalidDate):
            write_metadata(document, MetadataFields(title="New", modDate="not a date"))
        info = PdfReader(BytesIO(document.save())).metadata
        self.assertEqual(info.title, "Old")


if __name__ == "__main__":
    unittest.main()
