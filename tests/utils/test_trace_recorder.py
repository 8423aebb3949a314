from types import SimpleNamespace

import pytest

from pychip8.utils.trace import TraceRecorder


def _registers(**overrides):
    values = [0] * 16
    for index, value in overrides.items():
        values[int(index[1:], 16)] = value
    return SimpleNamespace(v=values, i=overrides.get("i", 0))


def _record(recorder, pc, opcode, **kwargs):
    defaults = dict(status="OK", sp=0, delay=0, sound=0, waiting=False)
    defaults.update(kwargs)
    recorder.record_step(_registers(), pc, opcode, **defaults)


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    _record(recorder, 0x200, 0x6001, mnemonic="LD")
    _record(recorder, 0x202, 0x7001, mnemonic="ADD")
    _record(recorder, 0x204, 0xF00A, mnemonic="LD", status="AWAITING_KEY", waiting=True)

    lines = list(recorder.format_entries())
    assert len(recorder) == 2
    assert len(lines) == 2
    assert "pc=0202" in lines[0]
    assert "pc=0204" in lines[1]
    assert "flags=WAIT" in lines[1]


def test_trace_recorder_handles_failed_fetch():
    recorder = TraceRecorder(1)
    _record(recorder, 0x0FFF, None, status="OUT_OF_BOUNDS", note="fetch")

    lines = list(recorder.format_entries())
    assert len(lines) == 1
    assert "opcode=----" in lines[0]
    assert "flags=fetch" in lines[0]
    assert recorder.last_entry().status == "OUT_OF_BOUNDS"


def test_entries_limit_and_clear():
    recorder = TraceRecorder(8)
    for offset in range(5):
        _record(recorder, 0x200 + offset * 2, 0x00E0)

    assert [entry.pc for entry in recorder.entries(2)] == [0x206, 0x208]

    recorder.clear()
    assert recorder.last_entry() is None
    assert list(recorder.entries()) == []


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        TraceRecorder(0)
