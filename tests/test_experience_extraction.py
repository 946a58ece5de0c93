"""
Tests for work experience extraction: header splitting, dates, achievements
and ordering.
"""

from cv_autofill.core.experience_parser import (
    extract_work_experience,
    is_achievement,
    parse_job_entry,
    sort_work_experience,
    split_title_company,
)
from cv_autofill.core.schemas import WorkExperienceEntry


class TestSplitTitleCompany:
    def test_at(self):
        assert split_title_company("Senior Engineer at Tech Corp") == ("Senior Engineer", "Tech Corp")

    def test_pipe(self):
        assert split_title_company("Software Engineer | Tech Company") == ("Software Engineer", "Tech Company")

    def test_company_first_is_swapped(self):
        assert split_title_company("Acme Inc - Developer") == ("Developer", "Acme Inc")
        assert split_title_company("Developer - Acme Inc") == ("Developer", "Acme Inc")

    def test_comma(self):
        assert split_title_company("Data Analyst, Beta") == ("Data Analyst", "Beta")

    def test_hyphenated_title(self):
        assert split_title_company("Co-founder at Startup") == ("Co-founder", "Startup")

    def test_no_separator(self):
        assert split_title_company("Freelancer") == ("Freelancer", None)


class TestParseJobEntry:
    def test_header_dates_and_bullet(self):
        entry = parse_job_entry("Senior Engineer at Tech Corp\nJan 2020 - Present\n• Led a team of 5")
        assert entry.job_title == "Senior Engineer"
        assert entry.company == "Tech Corp"
        assert entry.start_date == "01/2020"
        assert entry.end_date is None
        assert entry.current is True
        assert entry.achievements == ["Led a team of 5"]
        assert entry.description == "Led a team of 5"

    def test_dates_inline_in_header(self):
        entry = parse_job_entry("Software Engineer | Tech Company | 2020-Present")
        assert entry.job_title == "Software Engineer"
        assert entry.company == "Tech Company"
        assert entry.start_date == "01/2020"
        assert entry.current is True

    def test_dates_before_header(self):
        entry = parse_job_entry("Jan 2018 - Dec 2019\nData Analyst at Beta LLC")
        assert entry.job_title == "Data Analyst"
        assert entry.company == "Beta LLC"
        assert entry.start_date == "01/2018"
        assert entry.end_date == "12/2019"
        assert entry.current is False

    def test_company_first_header(self):
        entry = parse_job_entry("Acme Inc - Developer\n2018 - 2020")
        assert entry.job_title == "Developer"
        assert entry.company == "Acme Inc"
        assert (entry.start_date, entry.end_date) == ("01/2018", "01/2020")

    def test_achievements_and_description(self):
        entry = parse_job_entry(
            "Engineer at Acme Corp\n"
            "2019 - 2021\n"
            "Increased revenue by 20 percent\n"
            "Wrote internal tooling docs"
        )
        assert entry.achievements == ["Increased revenue by 20 percent"]
        assert entry.description == "Increased revenue by 20 percent Wrote internal tooling docs"

    def test_entry_without_header_is_dropped(self):
        assert parse_job_entry("• only a bullet line here") is None
        assert parse_job_entry("") is None

    def test_entry_without_company_is_dropped(self):
        assert parse_job_entry("Freelance Consultant\n2018 - 2020") is None
        assert extract_work_experience("Freelance Consultant\n2018 - 2020\nBuilt websites for local clients") == []

    def test_is_achievement(self):
        assert is_achievement("• Shipped the billing service")
        assert is_achievement("Reduced costs by 30%")
        assert not is_achievement("Maintained internal tools")


class TestOrdering:
    def test_current_role_first(self):
        section = "Analyst at Beta Corp\n2016 - 2019\n\nEngineer at Acme Corp\nMar 2020 - Present"
        entries = extract_work_experience(section)
        assert [e.job_title for e in entries] == ["Engineer", "Analyst"]
        assert entries[0].current is True

    def test_start_date_descending(self):
        entries = [
            WorkExperienceEntry(job_title="A", company="X", start_date="01/2010", end_date="01/2012"),
            WorkExperienceEntry(job_title="B", company="X", start_date="01/2015", end_date="01/2018"),
            WorkExperienceEntry(job_title="C", company="X", start_date="01/2012", end_date="01/2014"),
        ]
        assert [e.job_title for e in sort_work_experience(entries)] == ["B", "C", "A"]

    def test_undated_entries_go_last_in_document_order(self):
        entries = [
            WorkExperienceEntry(job_title="A", company="X"),
            WorkExperienceEntry(job_title="B", company="X", start_date="01/2015"),
            WorkExperienceEntry(job_title="C", company="X"),
        ]
        assert [e.job_title for e in sort_work_experience(entries)] == ["B", "A", "C"]

    def test_empty_section(self):
        assert extract_work_experience(None) == []
        assert extract_work_experience("") == []
