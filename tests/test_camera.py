"""Camera transitions, keyframe paths and the world/screen transform."""

import pytest

from core.camera import (
    CameraController,
    CameraPath,
    CameraTransition,
    Viewport,
    transform_of,
    transition_progress,
    viewport_at,
)
from core.errors import DegenerateInputWarning, DomainError


def _transition(**overrides):
    base = dict(
        start_frame=0, end_frame=10,
        initial=Viewport(0.0, 0.0, 100.0, 100.0),
        target=Viewport(50.0, 20.0, 200.0, 50.0),
        easing='linear',
        maintain_aspect_ratio=False,
    )
    base.update(overrides)
    return CameraTransition(**base)


# ---------------------------------------------------------------------------
# Single transitions
# ---------------------------------------------------------------------------


class TestViewportAt:
    def test_start_and_end_frames_hit_keyframes(self, linear_transition):
        assert viewport_at(0, linear_transition, 1920, 1080) == linear_transition.initial
        assert viewport_at(10, linear_transition, 1920, 1080) == linear_transition.target

    def test_linear_midpoint(self, linear_transition):
        vp = viewport_at(5, linear_transition, 1920, 1080)
        assert vp == Viewport(25.0, 10.0, 150.0, 75.0)

    def test_ease_in_out_shapes_progress(self):
        tr = _transition(easing='easeInOut')
        # raw 0.25 -> 2 * 0.25^2
        assert transition_progress(2.5, tr) == pytest.approx(0.125)
        assert transition_progress(5, tr) == pytest.approx(0.5)
        assert transition_progress(7.5, tr) == pytest.approx(0.875)

    def test_clamped_outside_range(self, linear_transition):
        assert viewport_at(-20, linear_transition, 1920, 1080) == linear_transition.initial
        assert viewport_at(99, linear_transition, 1920, 1080) == linear_transition.target

    def test_unclamped_extrapolates_linearly(self):
        tr = _transition(clamp_frames=False)
        vp = viewport_at(15, tr, 1920, 1080)
        assert vp.center_x == pytest.approx(75.0)
        assert vp.width == pytest.approx(250.0)
        assert vp.height == pytest.approx(25.0)

    def test_collapsed_extrapolation_warns_and_floors(self):
        tr = _transition(clamp_frames=False,
                         target=Viewport(0.0, 0.0, 10.0, 10.0))
        with pytest.warns(DegenerateInputWarning, match="collapsed"):
            vp = viewport_at(20, tr, 1920, 1080)
        assert vp.width > 0
        assert vp.height > 0

    def test_instant_transition(self):
        tr = _transition(start_frame=5, end_frame=5)
        assert viewport_at(4, tr, 1920, 1080) == tr.initial
        assert viewport_at(5, tr, 1920, 1080) == tr.target
        assert viewport_at(6, tr, 1920, 1080) == tr.target


class TestAdjustments:
    def test_aspect_lock_derives_height_from_width(self):
        tr = _transition(target=Viewport(960.0, 540.0, 600.0, 100.0),
                         maintain_aspect_ratio=True)
        vp = viewport_at(10, tr, 1920, 1080)
        assert vp.width == pytest.approx(600.0)
        assert vp.height == pytest.approx(337.5)

    def test_min_max_clamp(self):
        tr = _transition(min_width=120.0, max_height=80.0)
        vp = viewport_at(0, tr, 1920, 1080)
        assert vp.width == pytest.approx(120.0)
        assert vp.height == pytest.approx(80.0)

    def test_clamp_then_zoom_then_aspect(self):
        tr = _transition(min_width=150.0, zoom_multiplier=2.0, maintain_aspect_ratio=True)
        vp = viewport_at(0, tr, 200, 100)
        # 100 -> clamped 150 -> zoomed 75 -> height 75 / 2
        assert vp.width == pytest.approx(75.0)
        assert vp.height == pytest.approx(37.5)

    def test_zero_scene_height_skips_aspect_lock(self):
        tr = _transition(maintain_aspect_ratio=True)
        controller = CameraController(tr, 1920, 0)
        with pytest.warns(DegenerateInputWarning, match="aspect"):
            vp = controller.viewport(0)
        assert vp.height == pytest.approx(100.0)

    def test_zero_scene_width_skips_aspect_lock(self):
        with pytest.warns(DegenerateInputWarning, match="aspect"):
            vp = viewport_at(0, _transition(maintain_aspect_ratio=True), 0, 1080)
        assert vp.width == pytest.approx(100.0)
        assert vp.height == pytest.approx(100.0)


class TestTransitionValidation:
    def test_start_after_end(self):
        with pytest.raises(DomainError, match="start_frame"):
            _transition(start_frame=11)

    def test_zoom_must_be_positive(self):
        with pytest.raises(DomainError):
            _transition(zoom_multiplier=0.0)

    def test_min_above_max(self):
        with pytest.raises(DomainError, match="min_width"):
            _transition(min_width=300.0, max_width=200.0)

    def test_unknown_easing(self):
        with pytest.raises(DomainError, match="Unknown easing"):
            _transition(easing='bounce')

    def test_viewport_needs_positive_size(self):
        with pytest.raises(DomainError):
            Viewport(0.0, 0.0, 0.0, 10.0)

    def test_scene_width_must_be_positive(self, linear_transition):
        with pytest.raises(DomainError):
            CameraController(linear_transition, 0, 1080)


# ---------------------------------------------------------------------------
# Transform and readout
# ---------------------------------------------------------------------------


class TestTransform:
    @pytest.mark.parametrize("vp", [
        Viewport(960.0, 540.0, 1920.0, 1080.0),
        Viewport(1360.0, 340.0, 600.0, 337.5),
        Viewport(-123.4, 987.6, 33.0, 17.0),
    ])
    def test_center_maps_to_screen_center(self, vp):
        tf = transform_of(vp, 1920, 1080)
        sx, sy = tf.apply(vp.center)
        assert sx == pytest.approx(960.0, abs=1e-6)
        assert sy == pytest.approx(540.0, abs=1e-6)

    def test_full_view_is_identity(self):
        tf = transform_of(Viewport(960.0, 540.0, 1920.0, 1080.0), 1920, 1080)
        assert tf.scale == pytest.approx(1.0)
        assert tf.translate_x == pytest.approx(0.0)
        assert tf.translate_y == pytest.approx(0.0)

    def test_invert_undoes_apply(self):
        tf = transform_of(Viewport(1360.0, 340.0, 600.0, 337.5), 1920, 1080)
        for p in [(0.0, 0.0), (1360.0, 340.0), (-50.0, 2000.0)]:
            assert tf.invert(tf.apply(p)) == pytest.approx(p)

    def test_readout_uses_same_viewport(self):
        tr = _transition(maintain_aspect_ratio=True)
        controller = CameraController(tr, 1920, 1080)
        for frame in (0, 3, 10):
            vp = controller.viewport(frame)
            assert controller.screen_to_world(frame, (960.0, 540.0)) == pytest.approx(vp.center)


class TestObserver:
    def test_called_once_with_returned_viewport(self, linear_transition):
        seen = []
        controller = CameraController(linear_transition, 1920, 1080, observer=seen.append)
        vp = controller.evaluate(4)
        assert seen == [vp]

    def test_viewport_does_not_notify(self, linear_transition):
        seen = []
        controller = CameraController(linear_transition, 1920, 1080, observer=seen.append)
        controller.viewport(4)
        controller.transform(4)
        assert seen == []


# ---------------------------------------------------------------------------
# Keyframe paths
# ---------------------------------------------------------------------------


class TestCameraPath:
    @pytest.fixture
    def path(self):
        cam = CameraPath(1920, 1080, maintain_aspect_ratio=False)
        cam.add_keyframe(0, Viewport(0.0, 0.0, 100.0, 100.0), 'linear')
        cam.add_keyframe(10, Viewport(10.0, 0.0, 100.0, 100.0), 'linear')
        cam.add_keyframe(20, Viewport(20.0, 0.0, 100.0, 100.0), 'easeIn')
        return cam

    def test_holds_before_first_and_after_last(self, path):
        assert path.viewport_at(-5).center_x == pytest.approx(0.0)
        assert path.viewport_at(500).center_x == pytest.approx(20.0)

    def test_keyframes_are_hit(self, path):
        for frame, x in [(0, 0.0), (10, 10.0), (20, 20.0)]:
            assert path.viewport_at(frame).center_x == pytest.approx(x)

    def test_later_keyframe_easing_applies(self, path):
        assert path.viewport_at(5).center_x == pytest.approx(5.0)
        # easeIn over 10..20, raw 0.5 -> 0.25
        assert path.viewport_at(15).center_x == pytest.approx(12.5)

    def test_keyframes_sorted_on_insert(self):
        cam = CameraPath(1920, 1080, maintain_aspect_ratio=False)
        cam.add_keyframe(10, Viewport(10.0, 0.0, 100.0, 100.0), 'linear')
        cam.add_keyframe(0, Viewport(0.0, 0.0, 100.0, 100.0), 'linear')
        assert [k.frame for k in cam.keyframes] == [0, 10]
        assert cam.viewport_at(5).center_x == pytest.approx(5.0)

    def test_duplicate_frame_rejected(self, path):
        with pytest.raises(DomainError, match="duplicate"):
            path.add_keyframe(10, Viewport(0.0, 0.0, 1.0, 1.0))

    def test_empty_path_rejected(self):
        with pytest.raises(DomainError, match="no keyframes"):
            CameraPath(1920, 1080).viewport_at(0)

    def test_single_keyframe_is_static(self):
        cam = CameraPath(1920, 1080, maintain_aspect_ratio=False)
        cam.add_keyframe(30, Viewport(5.0, 6.0, 70.0, 80.0))
        assert cam.viewport_at(0) == Viewport(5.0, 6.0, 70.0, 80.0)
        assert cam.viewport_at(99) == Viewport(5.0, 6.0, 70.0, 80.0)

    def test_evaluate_notifies_observer_once(self):
        seen = []
        cam = CameraPath(1920, 1080, observer=seen.append)
        cam.add_keyframe(0, Viewport(960.0, 540.0, 1920.0, 1080.0))
        vp = cam.evaluate(3)
        assert seen == [vp]

    def test_transform_at_matches_viewport(self, path):
        tf = path.transform_at(15)
        assert tf == transform_of(path.viewport_at(15), 1920, 1080)

    @pytest.mark.parametrize("zoom", [0, -2.0])
    def test_zoom_must_be_positive(self, zoom):
        with pytest.raises(DomainError, match="zoom_multiplier"):
            CameraPath(1920, 1080, zoom_multiplier=zoom)
