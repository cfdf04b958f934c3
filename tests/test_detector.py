from types import SimpleNamespace

import numpy as np
import pytest

from tryon_hand.config import EstimatorConfig
from tryon_hand.coords import aspect_ratio_from_size
from tryon_hand import detector
from tryon_hand.detector import MediaPipeHandSource, _SolutionsBackend, _TasksBackend, hand_from_landmarks
from tryon_hand.drawing import draw_hands, draw_placement
from tryon_hand.mock import RIGHT_HAND_TEMPLATE, synthetic_hand
from tryon_hand.placement import compute_placement


def _landmarks(hand):
    return [SimpleNamespace(x=kp.x, y=kp.y, z=kp.z) for kp in hand.keypoints]


def test_hand_from_landmarks():
    src = synthetic_hand((0.5, 0.5))
    hand = hand_from_landmarks(_landmarks(src), label="Left", score=0.8)

    assert len(hand.keypoints) == len(RIGHT_HAND_TEMPLATE)
    assert hand.keypoint(16) == src.keypoint(16)
    assert hand.handedness.label == "Left"
    assert hand.handedness.score == 0.8
    assert hand.center == pytest.approx(src.center)


def test_hand_from_landmarks_without_z():
    hand = hand_from_landmarks([SimpleNamespace(x=0.1, y=0.2)])
    assert hand.keypoint(0).z == 0.0
    assert hand.handedness is None


def test_source_from_config_is_lazy():
    source = MediaPipeHandSource.from_config(EstimatorConfig(max_hands=1))
    assert not source.running
    with pytest.raises(RuntimeError):
        source.read(np.zeros((10, 10, 3), dtype=np.uint8))
    source.stop()


def test_overlay_draws_on_frame():
    frame = np.zeros((480, 640, 3), dtype=np.uint8)
    aspect = aspect_ratio_from_size(640, 480)
    hand = synthetic_hand((0.5, 0.5), label="Right")

    draw_hands(frame, [hand])
    assert frame.any()

    blank = np.zeros_like(frame)
    draw_placement(blank, compute_placement(hand, aspect_ratio=aspect), aspect)
    ring = hand.keypoint(13)
    x, y = int(ring.x * 640), int(ring.y * 480)
    assert blank[max(0, y - 40) : y + 40, max(0, x - 40) : x + 40].any()


class _FakeHands:
    def __init__(self, results):
        self.results = results
        self.frames = []
        self.closed = False

    def process(self, frame_rgb):
        self.frames.append(frame_rgb)
        return self.results

    def close(self):
        self.closed = True


class _FakeLandmarker:
    def __init__(self, result):
        self.result = result
        self.timestamps = []
        self.closed = False

    def detect(self, image):
        return self.result

    def detect_for_video(self, image, timestamp_ms):
        self.timestamps.append(timestamp_ms)
        return self.result

    def close(self):
        self.closed = True


_FAKE_MP = SimpleNamespace(
    Image=lambda image_format, data: SimpleNamespace(image_format=image_format, data=data),
    ImageFormat=SimpleNamespace(SRGB="srgb"),
)


def _use_solutions(monkeypatch, results):
    hands = _FakeHands(results)
    monkeypatch.setattr(detector, "_try_create_solutions_backend", lambda **kw: _SolutionsBackend(mp=None, hands=hands))
    return hands


def _use_tasks(monkeypatch, result):
    landmarker = _FakeLandmarker(result)
    monkeypatch.setattr(detector, "_try_create_solutions_backend", lambda **kw: None)
    monkeypatch.setattr(detector, "_create_tasks_backend", lambda **kw: _TasksBackend(mp=_FAKE_MP, landmarker=landmarker))
    return landmarker


def test_solutions_backend_read(monkeypatch):
    src = synthetic_hand((0.4, 0.6))
    results = SimpleNamespace(
        multi_hand_landmarks=[SimpleNamespace(landmark=_landmarks(src))],
        multi_handedness=[SimpleNamespace(classification=[SimpleNamespace(label="Left", score=0.93)])],
    )
    fake = _use_solutions(monkeypatch, results)

    with MediaPipeHandSource() as source:
        hands = source.read(np.zeros((4, 6, 3), dtype=np.uint8))

    assert fake.closed
    assert len(fake.frames) == 1
    assert len(hands) == 1
    assert hands[0].handedness.label == "Left"
    assert hands[0].handedness.score == pytest.approx(0.93)
    assert hands[0].keypoint(13) == src.keypoint(13)


def test_solutions_backend_read_without_handedness(monkeypatch):
    src = synthetic_hand((0.5, 0.5))
    results = SimpleNamespace(multi_hand_landmarks=[SimpleNamespace(landmark=_landmarks(src))], multi_handedness=None)
    _use_solutions(monkeypatch, results)

    with MediaPipeHandSource() as source:
        hands = source.read(np.zeros((4, 6, 3), dtype=np.uint8))

    assert len(hands) == 1
    assert hands[0].handedness is None


def test_solutions_backend_no_hands(monkeypatch):
    _use_solutions(monkeypatch, SimpleNamespace(multi_hand_landmarks=None, multi_handedness=None))

    with MediaPipeHandSource() as source:
        assert source.read(np.zeros((4, 6, 3), dtype=np.uint8)) == []


def test_tasks_backend_read_video_mode(monkeypatch):
    left = synthetic_hand((0.3, 0.5), mirror=True)
    right = synthetic_hand((0.7, 0.5))
    result = SimpleNamespace(
        hand_landmarks=[_landmarks(left), _landmarks(right)],
        handedness=[
            [SimpleNamespace(category_name="Left", score=0.81)],
            [SimpleNamespace(category_name=None, display_name="Right", score=0.7)],
        ],
    )
    fake = _use_tasks(monkeypatch, result)

    source = MediaPipeHandSource()
    source.start()
    frame = np.zeros((4, 6, 3), dtype=np.uint8)
    hands = source.read(frame)
    source.read(frame)
    source.stop()

    assert fake.closed
    assert not source.running
    assert fake.timestamps == [detector.TASKS_FRAME_INTERVAL_MS, 2 * detector.TASKS_FRAME_INTERVAL_MS]
    assert [h.handedness.label for h in hands] == ["Left", "Right"]
    assert hands[0].handedness.score == pytest.approx(0.81)
    assert hands[1].keypoint(0) == right.keypoint(0)


def test_tasks_backend_read_static_mode(monkeypatch):
    src = synthetic_hand((0.5, 0.5))
    fake = _use_tasks(monkeypatch, SimpleNamespace(hand_landmarks=[_landmarks(src)], handedness=[]))

    with MediaPipeHandSource(static_image_mode=True) as source:
        hands = source.read(np.zeros((4, 6, 3), dtype=np.uint8))

    assert fake.timestamps == []
    assert len(hands) == 1
    assert hands[0].handedness is None


def test_start_failure_is_runtime_error(monkeypatch):
    def fail(**kw):
        raise OSError("no model")

    monkeypatch.setattr(detector, "_try_create_solutions_backend", lambda **kw: None)
    monkeypatch.setattr(detector, "_create_tasks_backend", fail)

    source = MediaPipeHandSource(tasks_model_path="missing/hand_landmarker.task")
    with pytest.raises(RuntimeError, match="missing/hand_landmarker.task"):
        source.start()
    assert not source.running
