"""Parser for PubMed efetch XML (``PubmedArticleSet``) documents.

Each ``PubmedArticle`` becomes an ``article`` entry and each
``PubmedBookArticle`` a ``book`` entry. Field names follow BibTeX
conventions, with a few Medline-specific extras (``pmid``, ``pmc``, ``pii``,
``status``, ``copyright``, ``journal-abbreviation``) kept so callers can
decide what to drop.
"""

from __future__ import annotations

import re
from typing import List, Optional, TextIO

from lxml import etree

from medline_retrieval.core.models import BibEntry, ParserResult

ROOT_TAG = "PubmedArticleSet"
_YEAR_PATTERN = re.compile(r"\b(\d{4})\b")
_IGNORED_CHILDREN = {"DeleteCitation"}


def _get_text(element: etree._Element | None) -> str:
    """Extract normalized text from an element, including inline markup."""
    if element is None:
        return ""
    return " ".join("".join(element.itertext()).split())


def _find_text(parent: etree._Element | None, path: str) -> str:
    if parent is None:
        return ""
    return _get_text(parent.find(path))


def _format_author(author_elem: etree._Element) -> str:
    collective = _find_text(author_elem, "CollectiveName")
    if collective:
        return f"{{{collective}}}"

    last_name = _find_text(author_elem, "LastName")
    fore_name = _find_text(author_elem, "ForeName") or _find_text(author_elem, "Initials")
    if last_name and fore_name:
        return f"{last_name}, {fore_name}"
    return last_name or fore_name


def _extract_authors(author_list: etree._Element | None) -> str:
    if author_list is None:
        return ""
    names = [_format_author(author) for author in author_list.findall("Author")]
    return " and ".join(name for name in names if name)


def _extract_abstract(abstract: etree._Element | None) -> str:
    if abstract is None:
        return ""
    parts: List[str] = []
    for section in abstract.findall("AbstractText"):
        text = _get_text(section)
        if not text:
            continue
        label = section.get("Label")
        parts.append(f"{label}: {text}" if label else text)
    return " ".join(parts)


def _extract_copyright(abstract: etree._Element | None) -> str:
    return _find_text(abstract, "CopyrightInformation")


def _apply_pub_date(entry: BibEntry, pub_date: etree._Element | None) -> None:
    if pub_date is None:
        return
    year = _find_text(pub_date, "Year")
    month = _find_text(pub_date, "Month")
    if not year:
        # MedlineDate holds free text such as "1998 Dec-1999 Jan".
        medline_date = _find_text(pub_date, "MedlineDate")
        match = _YEAR_PATTERN.search(medline_date)
        if match:
            year = match.group(1)
    entry.set_field("year", year)
    entry.set_field("month", month.lower() if month else None)


def _apply_article_ids(entry: BibEntry, id_list: etree._Element | None) -> None:
    if id_list is None:
        return
    for article_id in id_list.findall("ArticleId"):
        id_type = (article_id.get("IdType") or "").lower()
        value = _get_text(article_id)
        if id_type in {"doi", "pii", "pmc"} and not entry.has_field(id_type):
            entry.set_field(id_type, value)


def _extract_keywords(citation: etree._Element) -> str:
    descriptors = [
        _get_text(descriptor)
        for descriptor in citation.findall("MeshHeadingList/MeshHeading/DescriptorName")
    ]
    return ", ".join(descriptor for descriptor in descriptors if descriptor)


class MedlineParser:
    """Convert PubMed efetch XML into :class:`BibEntry` values."""

    def __init__(self) -> None:
        self._xml_parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            load_dtd=False,
            remove_blank_text=True,
            # Input arrives already decoded; any declared encoding is overridden.
            encoding="utf-8",
        )

    def parse(self, stream: TextIO) -> ParserResult:
        text = stream.read()
        if not text.strip():
            return ParserResult.from_error("Empty Medline response")

        try:
            root = etree.fromstring(text.encode("utf-8"), parser=self._xml_parser)
        except etree.XMLSyntaxError as exc:
            return ParserResult.from_error(f"Malformed Medline XML: {exc}", exc)

        if root.tag != ROOT_TAG:
            return ParserResult.from_error(
                f"Unexpected root element <{root.tag}>, expected <{ROOT_TAG}>"
            )

        result = ParserResult()
        for child in root:
            if not isinstance(child.tag, str):
                continue
            if child.tag == "PubmedArticle":
                entry = self._parse_article(child)
            elif child.tag == "PubmedBookArticle":
                entry = self._parse_book_article(child)
            elif child.tag in _IGNORED_CHILDREN:
                continue
            else:
                result.add_warning(f"Skipped unsupported Medline element <{child.tag}>")
                continue

            if entry is None:
                result.add_warning(f"Skipped <{child.tag}> without a PMID")
                continue
            result.entries.append(entry)
        return result

    def _parse_article(self, element: etree._Element) -> Optional[BibEntry]:
        citation = element.find("MedlineCitation")
        if citation is None:
            return None
        pmid = _find_text(citation, "PMID")
        if not pmid:
            return None

        entry = BibEntry(entry_type="article")
        entry.set_field("pmid", pmid)
        entry.set_field("status", citation.get("Status"))

        article = citation.find("Article")
        if article is not None:
            journal = article.find("Journal")
            entry.set_field("title", _find_text(article, "ArticleTitle"))
            entry.set_field("author", _extract_authors(article.find("AuthorList")))
            entry.set_field("journal", _find_text(journal, "Title"))
            entry.set_field("journal-abbreviation", _find_text(journal, "ISOAbbreviation"))
            entry.set_field("issn", _find_text(journal, "ISSN"))
            entry.set_field("volume", _find_text(journal, "JournalIssue/Volume"))
            entry.set_field("number", _find_text(journal, "JournalIssue/Issue"))
            _apply_pub_date(entry, journal.find("JournalIssue/PubDate") if journal is not None else None)
            entry.set_field("pages", _find_text(article, "Pagination/MedlinePgn"))

            abstract = article.find("Abstract")
            entry.set_field("abstract", _extract_abstract(abstract))
            entry.set_field("copyright", _extract_copyright(abstract))
            entry.set_field("language", _find_text(article, "Language"))

            for location in article.findall("ELocationID"):
                id_type = (location.get("EIdType") or "").lower()
                if id_type in {"doi", "pii"} and not entry.has_field(id_type):
                    entry.set_field(id_type, _get_text(location))

        if not entry.has_field("journal-abbreviation"):
            entry.set_field("journal-abbreviation", _find_text(citation, "MedlineJournalInfo/MedlineTA"))
        entry.set_field("keywords", _extract_keywords(citation))
        _apply_article_ids(entry, element.find("PubmedData/ArticleIdList"))
        return entry

    def _parse_book_article(self, element: etree._Element) -> Optional[BibEntry]:
        document = element.find("BookDocument")
        if document is None:
            return None
        pmid = _find_text(document, "PMID")
        if not pmid:
            return None

        book = document.find("Book")
        entry = BibEntry(entry_type="book")
        entry.set_field("pmid", pmid)
        entry.set_field("title", _find_text(document, "ArticleTitle") or _find_text(book, "BookTitle"))
        if document.find("ArticleTitle") is not None:
            entry.set_field("booktitle", _find_text(book, "BookTitle"))

        authors = _extract_authors(document.find("AuthorList"))
        entry.set_field("author", authors or _extract_authors(book.find("AuthorList") if book is not None else None))
        entry.set_field("publisher", _find_text(book, "Publisher/PublisherName"))
        entry.set_field("address", _find_text(book, "Publisher/PublisherLocation"))
        _apply_pub_date(entry, book.find("PubDate") if book is not None else None)

        abstract = document.find("Abstract")
        entry.set_field("abstract", _extract_abstract(abstract))
        entry.set_field("copyright", _extract_copyright(abstract))
        entry.set_field("language", _find_text(document, "Language"))
        _apply_article_ids(entry, element.find("PubmedBookData/ArticleIdList"))
        return entry
