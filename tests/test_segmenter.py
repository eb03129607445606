# tests/test_segmenter.py
from core.segmenter import segment, segment_paragraphs


class TestSegment:
    def test_offsets_point_into_original_text(self, essay):
        sentences = segment(essay)
        assert len(sentences) == 3
        for seg in sentences:
            assert essay[seg.start : seg.end] == seg.text

    def test_document_order_and_indices(self, essay):
        sentences = segment(essay)
        assert [s.index for s in sentences] == [0, 1, 2]
        assert all(a.end <= b.start for a, b in zip(sentences, sentences[1:]))

    def test_drops_short_fragments(self):
        text = "Too short. Yes it is. This sentence is long enough to be compared."
        sentences = segment(text)
        assert [s.text for s in sentences] == ["This sentence is long enough to be compared."]

    def test_blank_text(self):
        assert segment("") == []
        assert segment("   \n ") == []


class TestSegmentParagraphs:
    def test_blank_lines_split_paragraphs(self):
        para = "A paragraph that is comfortably longer than one hundred characters, so that it survives the length filter."
        text = f"{para}\n\n  \n{para}\n\nshort one"
        paragraphs = segment_paragraphs(text)
        assert len(paragraphs) == 2
        for p in paragraphs:
            assert text[p.start : p.end] == para
        assert [p.index for p in paragraphs] == [0, 1]
