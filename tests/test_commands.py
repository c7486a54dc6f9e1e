from icpc_scoreboard import ContestState, ProblemCell, parse_line, run_session
from icpc_scoreboard.commands import format_cell


def _run(text: str, state: ContestState | None = None) -> list[str]:
    return list(run_session(state or ContestState(), text.strip().splitlines()))


def test_parse_line_submit():
    assert parse_line("SUBMIT B BY team1 WITH Accepted AT 42") == {
        "type": "SUBMIT",
        "problem": "B",
        "team": "team1",
        "status": "Accepted",
        "time": "42",
    }


def test_parse_line_query_submission_strips_prefixes():
    payload = parse_line("QUERY_SUBMISSION t1 WHERE PROBLEM=ALL AND STATUS=Runtime_Error")
    assert payload["problemFilter"] == "ALL"
    assert payload["statusFilter"] == "Runtime_Error"


def test_parse_line_blank_and_missing_tokens():
    assert parse_line("   ") is None
    assert parse_line("START DURATION 300") == {
        "type": "START",
        "duration": "300",
        "problemCount": None,
    }


def test_format_cell_four_encodings():
    assert format_cell(ProblemCell(True, 0, 0, False)) == "+"
    assert format_cell(ProblemCell(True, 3, 0, False)) == "+3"
    assert format_cell(ProblemCell(False, 0, 2, True)) == "0/2"
    assert format_cell(ProblemCell(False, 1, 4, True)) == "-1/4"
    assert format_cell(ProblemCell(False, 0, 0, False)) == "."
    assert format_cell(ProblemCell(False, 2, 0, False)) == "-2"


def test_registration_and_start_messages():
    out = _run(
        """
        ADDTEAM T1
        ADDTEAM T1
        START DURATION 300 PROBLEM 2
        START DURATION 300 PROBLEM 2
        ADDTEAM T2
        END
        """
    )
    assert out == [
        "[Info]Add successfully.",
        "[Error]Add failed: duplicated team name.",
        "[Info]Competition starts.",
        "[Error]Start failed: competition has started.",
        "[Error]Add failed: competition has started.",
        "[Info]Competition ends.",
    ]


def test_flush_ranks_lower_penalty_first():
    out = _run(
        """
        ADDTEAM T1
        ADDTEAM T2
        START DURATION 300 PROBLEM 2
        SUBMIT A BY T1 WITH Wrong_Answer AT 2
        SUBMIT A BY T1 WITH Accepted AT 10
        SUBMIT A BY T2 WITH Accepted AT 5
        FLUSH
        QUERY_RANKING T2
        QUERY_RANKING T1
        """
    )
    assert out[3:] == [
        "[Info]Flush scoreboard.",
        "T2 1 1 5 + .",
        "T1 2 1 30 +1 .",
        "[Info]Complete query ranking.",
        "T2 NOW AT RANKING 1",
        "[Info]Complete query ranking.",
        "T1 NOW AT RANKING 2",
    ]


def test_freeze_and_scroll_session():
    out = _run(
        """
        ADDTEAM T1
        ADDTEAM T2
        START DURATION 300 PROBLEM 2
        SUBMIT A BY T1 WITH Wrong_Answer AT 2
        SUBMIT A BY T1 WITH Accepted AT 10
        SUBMIT A BY T2 WITH Accepted AT 5
        FLUSH
        FREEZE
        FREEZE
        SUBMIT B BY T1 WITH Accepted AT 40
        SUBMIT B BY T2 WITH Time_Limit_Exceed AT 41
        FLUSH
        QUERY_RANKING T1
        SCROLL
        SCROLL
        """
    )
    assert out[6:] == [
        "[Info]Freeze scoreboard.",
        "[Error]Freeze failed: scoreboard has been frozen.",
        "[Info]Flush scoreboard.",
        "T2 1 1 5 + 0/1",
        "T1 2 1 30 +1 0/1",
        "[Info]Complete query ranking.",
        "[Warning]Scoreboard is frozen. The ranking may be inaccurate until it were scrolled.",
        "T1 NOW AT RANKING 2",
        "[Info]Scroll scoreboard.",
        "T2 1 1 5 + 0/1",
        "T1 2 1 30 +1 0/1",
        "T1 T2 2 70",
        "T1 1 2 70 +1 +",
        "T2 2 1 5 + .",
        "[Error]Scroll failed: scoreboard has not been frozen.",
    ]


def test_frozen_cell_shows_prior_wrong_count():
    out = _run(
        """
        ADDTEAM T1
        START DURATION 300 PROBLEM 1
        SUBMIT A BY T1 WITH Runtime_Error AT 3
        FREEZE
        SUBMIT A BY T1 WITH Wrong_Answer AT 200
        SUBMIT A BY T1 WITH Accepted AT 210
        FLUSH
        """
    )
    assert out[-1] == "T1 1 0 0 -1/2"


def test_query_submission_scenarios():
    out = _run(
        """
        ADDTEAM T1
        ADDTEAM T2
        START DURATION 300 PROBLEM 2
        SUBMIT A BY T1 WITH Wrong_Answer AT 10
        SUBMIT A BY T1 WITH Runtime_Error AT 20
        SUBMIT A BY T1 WITH Accepted AT 30
        QUERY_SUBMISSION T1 WHERE PROBLEM=ALL AND STATUS=ALL
        QUERY_SUBMISSION T1 WHERE PROBLEM=A AND STATUS=Wrong_Answer
        QUERY_SUBMISSION T1 WHERE PROBLEM=B AND STATUS=ALL
        QUERY_SUBMISSION T2 WHERE PROBLEM=ALL AND STATUS=ALL
        QUERY_SUBMISSION ghost WHERE PROBLEM=ALL AND STATUS=ALL
        """
    )
    assert out[3:] == [
        "[Info]Complete query submission.",
        "T1 A Accepted 30",
        "[Info]Complete query submission.",
        "T1 A Wrong_Answer 10",
        "[Info]Complete query submission.",
        "Cannot find any submission.",
        "[Info]Complete query submission.",
        "Cannot find any submission.",
        "[Error]Query submission failed: cannot find the team.",
    ]


def test_query_ranking_unknown_team():
    out = _run(
        """
        ADDTEAM T1
        START DURATION 300 PROBLEM 1
        QUERY_RANKING nobody
        """
    )
    assert out[-1] == "[Error]Query ranking failed: cannot find the team."
    assert not any("NOW AT RANKING" in line for line in out)


def test_unknown_status_counts_as_wrong_answer():
    state = ContestState()
    _run(
        """
        ADDTEAM T1
        START DURATION 300 PROBLEM 1
        SUBMIT A BY T1 WITH Compile_Error AT 3
        """,
        state,
    )
    assert state.teams["T1"].problems[0].wrong_submissions == 1
    assert state.submissions[0].outcome.value == "Wrong_Answer"


def test_malformed_and_unknown_lines_are_skipped():
    out = _run(
        """
        ADDTEAM T1
        BOGUS COMMAND
        START DURATION 300 PROBLEM 2

        SUBMIT A BY T1 WITH Accepted AT soon
        SUBMIT A BY T1 WITH Accepted AT -5
        SUBMIT A BY
        SUBMIT A BY ghost WITH Accepted AT 5
        SUBMIT Z BY T1 WITH Accepted AT 5
        FLUSH
        """
    )
    assert out == [
        "[Info]Add successfully.",
        "[Info]Competition starts.",
        "[Info]Flush scoreboard.",
        "T1 1 0 0 . .",
    ]


def test_end_stops_reading_input():
    out = _run(
        """
        ADDTEAM T1
        END
        ADDTEAM T2
        """
    )
    assert out == ["[Info]Add successfully.", "[Info]Competition ends."]


def test_ranking_before_first_flush_follows_registration_order():
    out = _run(
        """
        ADDTEAM zeta
        ADDTEAM alpha
        START DURATION 300 PROBLEM 1
        SUBMIT A BY zeta WITH Accepted AT 1
        QUERY_RANKING zeta
        QUERY_RANKING alpha
        FLUSH
        QUERY_RANKING alpha
        """
    )
    assert out[3:] == [
        "[Info]Complete query ranking.",
        "zeta NOW AT RANKING 1",
        "[Info]Complete query ranking.",
        "alpha NOW AT RANKING 2",
        "[Info]Flush scoreboard.",
        "zeta 1 1 1 +",
        "alpha 2 0 0 .",
        "[Info]Complete query ranking.",
        "alpha NOW AT RANKING 2",
    ]


def test_long_team_name_registers_and_is_queryable():
    name = "x" * 300
    out = _run(
        f"""
        ADDTEAM {name}
        START DURATION 300 PROBLEM 1
        QUERY_RANKING {name}
        """
    )
    assert out == [
        "[Info]Add successfully.",
        "[Info]Competition starts.",
        "[Info]Complete query ranking.",
        f"{name} NOW AT RANKING 1",
    ]


def test_start_with_too_many_problems_reports_error():
    out = _run(
        """
        ADDTEAM T1
        START DURATION 300 PROBLEM 27
        START DURATION 300 PROBLEM 26
        """
    )
    assert out == [
        "[Info]Add successfully.",
        "[Error]Start failed: invalid problem count.",
        "[Info]Competition starts.",
    ]


def test_scroll_swap_lines_carry_final_totals():
    out = _run(
        """
        ADDTEAM Ant
        ADDTEAM Bee
        ADDTEAM Cat
        START DURATION 300 PROBLEM 2
        SUBMIT A BY Bee WITH Accepted AT 10
        SUBMIT A BY Cat WITH Accepted AT 20
        FLUSH
        FREEZE
        SUBMIT A BY Ant WITH Accepted AT 15
        SUBMIT B BY Ant WITH Accepted AT 30
        SCROLL
        """
    )
    assert out[-9:] == [
        "[Info]Scroll scoreboard.",
        "Bee 1 1 10 + .",
        "Cat 2 1 20 + .",
        "Ant 3 0 0 0/1 0/1",
        "Ant Cat 2 45",
        "Ant Bee 2 45",
        "Ant 1 2 45 + +",
        "Bee 2 1 10 + .",
        "Cat 3 1 20 + .",
    ]
