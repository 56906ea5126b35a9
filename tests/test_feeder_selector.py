import pytest

from discarr.errors import NoFeederForTarget
from discarr.feeders import FFmpegV4L2Feeder, MPVDisplayFeeder, create_feeder_for_target
from discarr.target import DisplayTarget, HardwareTarget, LoopbackTarget

from helpers import SleepFeeder

TARGETS = [
    DisplayTarget(":99"),
    LoopbackTarget("/dev/video10"),
    LoopbackTarget("/dev/video10", "hw:Loopback,0"),
    HardwareTarget("/dev/video0"),
]


@pytest.mark.parametrize("target", TARGETS, ids=lambda t: t.type)
def test_selected_feeder_supports_target_or_none_exists(target):
    try:
        feeder = create_feeder_for_target(target)
    except NoFeederForTarget:
        assert isinstance(target, HardwareTarget)
    else:
        assert feeder.supports_target(target)


def test_display_target_gets_mpv():
    assert isinstance(create_feeder_for_target(DisplayTarget(":99")), MPVDisplayFeeder)


def test_loopback_target_gets_ffmpeg():
    assert isinstance(create_feeder_for_target(LoopbackTarget("/dev/video10")), FFmpegV4L2Feeder)


def test_hardware_target_has_no_feeder():
    with pytest.raises(NoFeederForTarget) as exc:
        create_feeder_for_target(HardwareTarget("/dev/video0"))
    assert "hardware" in str(exc.value)
    assert exc.value.kind == "NoFeederForTarget"


def test_every_call_returns_a_fresh_feeder():
    target = DisplayTarget(":99")
    assert create_feeder_for_target(target) is not create_feeder_for_target(target)


def test_custom_feeder_list():
    feeder = create_feeder_for_target(DisplayTarget(":1"), feeders=(SleepFeeder,))
    assert isinstance(feeder, SleepFeeder)
    with pytest.raises(NoFeederForTarget):
        create_feeder_for_target(LoopbackTarget("/dev/video10"), feeders=(SleepFeeder,))


def test_target_projection():
    assert DisplayTarget(":99").to_dict() == {"type": "display", "display": ":99"}
    assert LoopbackTarget("/dev/video10").to_dict() == {
        "type": "v4l2", "device": "/dev/video10", "audio_device": None}
    assert HardwareTarget("/dev/video0").to_dict() == {"type": "hardware", "device": "/dev/video0"}
