from datetime import date, time
from typing import Optional

import pytest

from meckano_filler.dialog import Timing
from meckano_filler.errors import DialogNotFound, RowParseFailure, SubmitDisabled, SubmitNotFound
from meckano_filler.form import CHANGE_EVENTS, FormFiller, parse_row
from meckano_filler.models import RowStatus, TimeWindow
from meckano_filler.time_data import TimeDataSource
from meckano_filler.vocabulary import SkipReason

from .fakes import FakeDocument, dialog_html, page_html, row_html


class DecliningSource(TimeDataSource):
	"""Declines one specific date."""

	def __init__(self, declined: date) -> None:
		self.declined = declined
		self.calls: list[date] = []

	def get_time_data(self, day: date) -> Optional[TimeWindow]:
		self.calls.append(day)
		if day == self.declined:
			return None
		return TimeWindow(checkin=time(8, 0), checkout=time(17, 0))


class ExplodingSource(TimeDataSource):
	def get_time_data(self, day: date) -> Optional[TimeWindow]:
		raise RuntimeError('boom')


@pytest.fixture
def filler_for(config, clock):
	def build(document):
		return FormFiller(document, config, clock)

	return build


def single_row_page(**row):
	return FakeDocument(page_html(dialog_html([row_html(**row)])))


def first_row(document):
	return document.query('.hours-report').query_all('tr')[1]


def test_parse_row_reads_all_parts():
	document = single_row_page(date_text='26/08/2025 ב', special='ערב חג', absence='30148')

	info = parse_row(first_row(document))

	assert info.date == date(2025, 8, 26)
	assert info.weekday == 'ב'
	assert info.special_text == 'ערב חג'
	assert info.absence_code == '30148'
	assert info.full_text == '26/08/2025 ב'


def test_parse_row_treats_zero_as_no_absence():
	info = parse_row(first_row(single_row_page(date_text='26/08/2025 ב')))

	assert info.absence_code is None
	assert info.special_text == ''


@pytest.mark.parametrize('date_text', ['', 'סיכום', '2025-08-26 ב', '31/02/2025 ב'])
def test_parse_row_rejects_bad_dates(date_text):
	with pytest.raises(RowParseFailure):
		parse_row(first_row(single_row_page(date_text=date_text)))


def test_fills_empty_working_day(filler_for, source):
	document = single_row_page(date_text='26/08/2025 ב')

	result = filler_for(document).fill_all(source)

	assert result.success
	assert result.counts.filled == 1
	assert document.input_values('checkIn') == ['09:00']
	assert document.input_values('checkOut') == ['18:00']
	assert [events for _, _, events in document.writes] == [CHANGE_EVENTS, CHANGE_EVENTS]


def test_weekend_row_is_left_untouched(filler_for, source):
	document = single_row_page(date_text='25/08/2025 ו')

	result = filler_for(document).fill_all(source)

	assert result.counts.skipped == 1
	assert result.outcomes[0].detail == SkipReason.WEEKEND
	assert document.writes == []
	assert document.input_values('checkIn') == ['']


def test_week_pass_counts(filler_for, source, open_page):
	result = filler_for(open_page).fill_all(source)

	assert result.success
	assert (result.counts.filled, result.counts.skipped, result.counts.errors) == (4, 3, 0)
	assert [outcome.status for outcome in result.outcomes] == [
		RowStatus.FILLED,
		RowStatus.SKIPPED,
		RowStatus.FILLED,
		RowStatus.FILLED,
		RowStatus.FILLED,
		RowStatus.SKIPPED,
		RowStatus.SKIPPED,
	]


def test_existing_values_are_never_overwritten(filler_for, source, open_page):
	filler_for(open_page).fill_all(source)

	assert open_page.input_values('checkIn') == ['09:00', '08:45', '08:50', '09:00', '09:00', '', '']
	assert open_page.input_values('checkOut') == ['18:00', '17:30', '18:00', '18:00', '18:00', '', '']


def test_partial_row_fills_only_missing_field(filler_for, source):
	document = single_row_page(date_text='26/08/2025 ג', checkin='08:50')

	result = filler_for(document).fill_all(source)

	assert result.outcomes[0].written == ('check-out 18:00',)
	assert len(document.writes) == 1


def test_second_pass_changes_nothing(filler_for, source, open_page):
	filler = filler_for(open_page)
	filler.fill_all(source)
	writes_after_first = len(open_page.writes)

	second = filler.fill_all(source)

	assert len(open_page.writes) == writes_after_first
	assert second.counts.filled == 0
	assert second.counts.skipped == 7
	completed = [o for o in second.outcomes if o.detail == SkipReason.ALREADY_COMPLETE]
	assert len(completed) == 5


def test_declined_date_counts_as_error_and_continues(filler_for):
	document = FakeDocument(
		page_html(dialog_html([row_html('24/08/2025 א'), row_html('26/08/2025 ג')]))
	)
	source = DecliningSource(date(2025, 8, 24))

	result = filler_for(document).fill_all(source)

	assert result.success
	assert (result.counts.filled, result.counts.errors) == (1, 1)
	assert source.calls == [date(2025, 8, 24), date(2025, 8, 26)]
	assert document.input_values('checkIn') == ['', '08:00']


def test_exception_in_row_becomes_error(filler_for):
	document = single_row_page(date_text='26/08/2025 ב')

	result = filler_for(document).fill_all(ExplodingSource())

	assert result.success
	assert result.counts.errors == 1
	assert 'boom' in result.outcomes[0].detail


def test_unparsable_row_is_skipped(filler_for, source):
	document = FakeDocument(
		page_html(dialog_html(['<tr><td>סה"כ</td></tr>', row_html('26/08/2025 ב')]))
	)

	result = filler_for(document).fill_all(source)

	assert (result.counts.filled, result.counts.skipped) == (1, 1)
	assert result.outcomes[0].detail == SkipReason.UNPARSABLE


def test_row_without_inputs_is_an_error(filler_for, source):
	row = '<tr><td class="date"><span class="dateText">26/08/2025 ב</span></td></tr>'
	document = FakeDocument(page_html(dialog_html([row, row_html('27/08/2025 ד')])))

	result = filler_for(document).fill_all(source)

	assert result.counts.errors == 1
	assert result.counts.filled == 1


def test_missing_dialog_or_table_fails_the_pass(filler_for, source):
	no_dialog = filler_for(FakeDocument(page_html())).fill_all(source)
	no_table = filler_for(
		FakeDocument(page_html('<div id="freeReporting-dialog"></div>'))
	).fill_all(source)

	assert not no_dialog.success and no_dialog.error == 'Dialog not found'
	assert not no_table.success and no_table.error == 'Time table not found in dialog'


def test_delays_between_fields_and_rows(filler_for, clock, source):
	document = FakeDocument(
		page_html(dialog_html([row_html('24/08/2025 א'), row_html('29/08/2025 ו')]))
	)

	filler_for(document).fill_all(source)

	assert clock.sleeps == [Timing.BETWEEN_FIELDS, Timing.BETWEEN_ROWS]


def test_dry_run_plans_without_writing(filler_for, clock, source, open_page):
	result = filler_for(open_page).fill_all(source, dry_run=True)

	assert result.counts.filled == 4
	assert open_page.writes == []
	assert clock.sleeps == []


def test_submit_closes_dialog(filler_for, clock, open_page):
	open_page.on_click('.update-freeReporting', lambda: open_page.remove('freeReporting-dialog'))

	result = filler_for(open_page).submit_and_confirm()

	assert result.closed
	assert result.attempts == 1
	assert result.warning is None
	assert clock.sleeps == [Timing.AFTER_SUBMIT]


def test_submit_detects_hidden_dialog(filler_for, clock, open_page):
	clock.at(
		Timing.AFTER_SUBMIT + 100,
		lambda: open_page.set_display('freeReporting-dialog', 'none'),
	)

	result = filler_for(open_page).submit_and_confirm()

	assert result.closed
	assert result.attempts == 2


def test_dialog_left_open_is_a_warning(filler_for, clock, open_page):
	result = filler_for(open_page).submit_and_confirm()

	assert not result.closed
	assert result.attempts == 3
	assert 'did not close' in (result.warning or '')
	assert clock.sleeps == [Timing.AFTER_SUBMIT, 100, 100]


def test_disabled_submit_is_not_clicked(filler_for):
	document = FakeDocument(page_html(dialog_html([row_html('24/08/2025 א')], submit_disabled=True)))

	with pytest.raises(SubmitDisabled):
		filler_for(document).submit_and_confirm()

	assert document.clicks == []


def test_missing_submit_or_dialog(filler_for):
	no_button = FakeDocument(page_html(dialog_html([row_html('24/08/2025 א')], submit=False)))

	with pytest.raises(SubmitNotFound):
		filler_for(no_button).submit_and_confirm()
	with pytest.raises(DialogNotFound):
		filler_for(FakeDocument(page_html())).submit_and_confirm()
