"""Tesseract OCR over PyMuPDF-rendered pages."""

import pymupdf
import pytesseract
from PIL import Image

from medreport.logging.logger import Log
from medreport.ocr.base import BaseOcrEngine
from medreport.ocr.exceptions import OcrError
from medreport.ocr.models import OcrPage, OcrResult


class TesseractAdapter(BaseOcrEngine):
    """Renders each PDF page to an image and runs Tesseract on it."""

    def __init__(self, *, language: str = "eng", dpi: int = 200) -> None:
        self._language = language
        self._dpi = dpi

    def recognize(self, pdf_bytes: bytes) -> OcrResult:
        try:
            images = self._render_pages(pdf_bytes)
            pages = [
                self._recognize_page(image, page_number)
                for page_number, image in enumerate(images, start=1)
            ]
        except OcrError:
            raise
        except Exception as exc:
            raise OcrError(f"tesseract OCR failed: {exc}") from exc

        text = "\n".join(page.text for page in pages if page.text).strip()
        scored = [page.confidence for page in pages if page.text]
        confidence = sum(scored) / len(scored) if scored else 0.0
        Log.info(f"OCR recognized {len(text)} chars, confidence {confidence:.2f}")
        return OcrResult(text=text, confidence=confidence, pages=pages)

    def _render_pages(self, pdf_bytes: bytes) -> list[Image.Image]:
        zoom = self._dpi / 72
        images: list[Image.Image] = []
        with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
            for page in doc:
                pix = page.get_pixmap(matrix=pymupdf.Matrix(zoom, zoom))
                images.append(Image.frombytes("RGB", (pix.width, pix.height), pix.samples))
        return images

    def _recognize_page(self, image: Image.Image, page_number: int) -> OcrPage:
        data = pytesseract.image_to_data(
            image,
            lang=self._language,
            output_type=pytesseract.Output.DICT,
        )
        lines: dict[tuple[int, int, int], list[str]] = {}
        confidences: list[float] = []
        for i, word in enumerate(data["text"]):
            score = float(data["conf"][i])
            word = word.strip()
            if score < 0 or not word:
                continue
            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            lines.setdefault(key, []).append(word)
            confidences.append(score / 100.0)
        text = "\n".join(" ".join(words) for words in lines.values())
        confidence = sum(confidences) / len(confidences) if confidences else 0.0
        return OcrPage(page_number=page_number, text=text, confidence=confidence)
