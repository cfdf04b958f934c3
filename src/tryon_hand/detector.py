from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import cv2

from .config import DEFAULT_MODEL_PATH
from .model_assets import ensure_hand_landmarker_task
from .types import Hand, Handedness, Keypoint
from .utils import center_from_points


logger = logging.getLogger(__name__)

# Frame interval used for Tasks VIDEO mode timestamps (~30fps).
TASKS_FRAME_INTERVAL_MS = 33


@dataclass(frozen=True)
class _SolutionsBackend:
    mp: object
    hands: object


@dataclass(frozen=True)
class _TasksBackend:
    mp: object
    landmarker: object


def _try_create_solutions_backend(
    static_image_mode: bool,
    max_num_hands: int,
    min_detection_confidence: float,
    min_tracking_confidence: float,
) -> Optional[_SolutionsBackend]:
    import mediapipe as mp  # type: ignore

    if not hasattr(mp, "solutions"):
        return None
    hands = mp.solutions.hands.Hands(
        static_image_mode=static_image_mode,
        max_num_hands=max_num_hands,
        min_detection_confidence=min_detection_confidence,
        min_tracking_confidence=min_tracking_confidence,
    )
    return _SolutionsBackend(mp=mp, hands=hands)


def _create_tasks_backend(
    model_path: str,
    static_image_mode: bool,
    max_num_hands: int,
    min_detection_confidence: float,
    min_tracking_confidence: float,
) -> _TasksBackend:
    """
    Fallback for MediaPipe distributions that do not include `mp.solutions`.

    Uses the Tasks HandLandmarker API, which needs a `.task` model asset on disk.
    """

    import mediapipe as mp  # type: ignore
    from mediapipe.tasks.python import BaseOptions  # type: ignore
    from mediapipe.tasks.python.vision import HandLandmarker, HandLandmarkerOptions, RunningMode  # type: ignore

    model_path = ensure_hand_landmarker_task(model_path)
    options = HandLandmarkerOptions(
        base_options=BaseOptions(model_asset_path=model_path),
        running_mode=RunningMode.IMAGE if static_image_mode else RunningMode.VIDEO,
        num_hands=max_num_hands,
        min_hand_detection_confidence=min_detection_confidence,
        min_tracking_confidence=min_tracking_confidence,
    )
    return _TasksBackend(mp=mp, landmarker=HandLandmarker.create_from_options(options))


def hand_from_landmarks(landmarks, label: Optional[str] = None, score: Optional[float] = None) -> Hand:
    """Convert one MediaPipe landmark list (objects with x/y/z) into a `Hand`."""

    kps = tuple(
        Keypoint(index=idx, x=float(lm.x), y=float(lm.y), z=float(getattr(lm, "z", 0.0) or 0.0))
        for idx, lm in enumerate(landmarks)
    )
    return Hand(
        keypoints=kps,
        handedness=Handedness(label=label, score=score) if label else None,
        center=center_from_points((kp.x, kp.y) for kp in kps),
    )


class MediaPipeHandSource:
    """
    Hand landmark source backed by MediaPipe Hands.

    Input frames are expected as **BGR** images (OpenCV default). The backend is
    created in `start()` and released in `stop()`.
    """

    def __init__(
        self,
        static_image_mode: bool = False,
        max_num_hands: int = 2,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        tasks_model_path: str = DEFAULT_MODEL_PATH,
    ) -> None:
        self._static_image_mode = static_image_mode
        self._max_num_hands = max_num_hands
        self._min_detection_confidence = min_detection_confidence
        self._min_tracking_confidence = min_tracking_confidence
        self._tasks_model_path = tasks_model_path

        self._solutions: Optional[_SolutionsBackend] = None
        self._tasks: Optional[_TasksBackend] = None
        self._tasks_timestamp_ms = 0

    @classmethod
    def from_config(cls, config, static_image_mode: bool = False) -> "MediaPipeHandSource":
        return cls(
            static_image_mode=static_image_mode,
            max_num_hands=config.max_hands,
            min_detection_confidence=config.min_detection_confidence,
            min_tracking_confidence=config.min_tracking_confidence,
            tasks_model_path=config.model_path,
        )

    @property
    def running(self) -> bool:
        return self._solutions is not None or self._tasks is not None

    def start(self) -> None:
        if self.running:
            return

        self._solutions = _try_create_solutions_backend(
            static_image_mode=self._static_image_mode,
            max_num_hands=self._max_num_hands,
            min_detection_confidence=self._min_detection_confidence,
            min_tracking_confidence=self._min_tracking_confidence,
        )
        if self._solutions is not None:
            logger.debug("Using MediaPipe Solutions hands backend")
            return

        try:
            self._tasks = _create_tasks_backend(
                model_path=self._tasks_model_path,
                static_image_mode=self._static_image_mode,
                max_num_hands=self._max_num_hands,
                min_detection_confidence=self._min_detection_confidence,
                min_tracking_confidence=self._min_tracking_confidence,
            )
        except (ImportError, RuntimeError, OSError) as e:
            raise RuntimeError(
                "Could not initialize MediaPipe Hands.\n"
                "Your installed `mediapipe` package does not expose `mp.solutions`, and the Tasks\n"
                f"HandLandmarker fallback could not be initialized with model {self._tasks_model_path}."
            ) from e
        self._tasks_timestamp_ms = 0
        logger.debug("Using MediaPipe Tasks HandLandmarker backend")

    def stop(self) -> None:
        if self._solutions is not None:
            self._solutions.hands.close()
            self._solutions = None
        if self._tasks is not None:
            self._tasks.landmarker.close()
            self._tasks = None

    def __enter__(self) -> "MediaPipeHandSource":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def read(self, frame_bgr) -> List[Hand]:
        if not self.running:
            raise RuntimeError("MediaPipeHandSource.read() called before start()")

        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

        if self._solutions is not None:
            results = self._solutions.hands.process(frame_rgb)
            if not results.multi_hand_landmarks:
                return []

            handedness_list = results.multi_handedness or []
            hands: List[Hand] = []
            for i, hand_landmarks in enumerate(results.multi_hand_landmarks):
                label: Optional[str] = None
                score: Optional[float] = None
                if i < len(handedness_list) and handedness_list[i].classification:
                    c = handedness_list[i].classification[0]
                    label = getattr(c, "label", None)
                    score = float(getattr(c, "score", 0.0))
                hands.append(hand_from_landmarks(hand_landmarks.landmark, label, score))
            return hands

        mp = self._tasks.mp
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)

        if self._static_image_mode:
            result = self._tasks.landmarker.detect(mp_image)
        else:
            # VIDEO mode requires monotonically increasing timestamps.
            self._tasks_timestamp_ms += TASKS_FRAME_INTERVAL_MS
            result = self._tasks.landmarker.detect_for_video(mp_image, self._tasks_timestamp_ms)

        hand_landmarks_list = getattr(result, "hand_landmarks", None) or []
        handedness_list = getattr(result, "handedness", None) or []

        hands = []
        for i, landmarks in enumerate(hand_landmarks_list):
            label = None
            score = None
            if i < len(handedness_list) and handedness_list[i]:
                cat0 = handedness_list[i][0]
                label = getattr(cat0, "category_name", None) or getattr(cat0, "display_name", None)
                score = float(getattr(cat0, "score", 0.0))
            hands.append(hand_from_landmarks(landmarks, label, score))
        return hands
