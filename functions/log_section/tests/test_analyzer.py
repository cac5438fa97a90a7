import io

import numpy as np
import pytest
from PIL import Image

from log_section import annotation
from log_section.analyzer import SectionAnalyzer, analyze_log_section
from log_section.errors import DecodeError, InvalidCalibration, NoRegionFound

from .fixtures.rasters import FakeOCR, make_disk, make_rectangle


def test_rectangle_properties():
    W, H, H_mm = 40, 60, 300.0
    scale = H_mm / H
    result = analyze_log_section(make_rectangle(W, H, x0=0, y0=0, canvas=(80, 60)), H_mm, "rect.png")

    assert result.filename == "rect.png"
    assert result.area_mm2 == pytest.approx(W * H * scale ** 2)
    assert result.centroid_x_mm == pytest.approx(W / 2 * scale)
    assert result.centroid_y_mm == pytest.approx(H / 2 * scale)
    closed = scale ** 4 * W * H ** 3 / 12
    assert result.Ixx_mm4 == pytest.approx(closed, rel=1.0 / H ** 2 + 1e-9)
    assert result.section_modulus_mm3 == pytest.approx(result.Ixx_mm4 / (H_mm / 2))
    assert result.detected_height_mm is None
    assert result.height_source == "explicit"
    assert result.processed_image.startswith(b"\x89PNG")


def test_stray_text_does_not_change_results():
    clean = make_rectangle()
    noisy = clean.copy()
    noisy[2:8, 2:20] = 0
    noisy[110:116, 70:95] = 0
    a = analyze_log_section(clean, 300.0)
    b = analyze_log_section(noisy, 300.0)
    assert a.area_mm2 == b.area_mm2
    assert a.Ixx_mm4 == b.Ixx_mm4
    assert a.centroid_y_mm == b.centroid_y_mm


def test_scale_uses_contour_height_not_image_height():
    small = analyze_log_section(make_rectangle(canvas=(120, 100)), 300.0)
    large = analyze_log_section(make_rectangle(canvas=(400, 100)), 300.0)
    assert small.area_mm2 == pytest.approx(large.area_mm2)


def test_disk_section_modulus_close_to_closed_form():
    r_px = 40
    H_mm = 200.0
    result = analyze_log_section(make_disk(radius=r_px, center=(50, 50), canvas=(100, 100)), H_mm)
    r_mm = H_mm / 2
    assert result.area_mm2 == pytest.approx(np.pi * r_mm ** 2, rel=0.02)
    assert result.Ixx_mm4 == pytest.approx(np.pi * r_mm ** 4 / 4, rel=0.03)
    assert result.section_modulus_mm3 == pytest.approx(np.pi * r_mm ** 3 / 4, rel=0.03)


def test_pipeline_is_idempotent(rectangle):
    a = analyze_log_section(rectangle, 250.0)
    b = analyze_log_section(rectangle, 250.0)
    assert (a.area_mm2, a.centroid_x_mm, a.centroid_y_mm, a.Ixx_mm4, a.section_modulus_mm3) == \
           (b.area_mm2, b.centroid_x_mm, b.centroid_y_mm, b.Ixx_mm4, b.section_modulus_mm3)


def test_empty_image_raises_no_region(blank):
    with pytest.raises(NoRegionFound):
        analyze_log_section(blank, 300.0)


def test_invalid_height_raises(rectangle):
    with pytest.raises(InvalidCalibration):
        analyze_log_section(rectangle, 0)


def test_process_uses_ocr_height_when_none_given(rectangle):
    ocr = FakeOCR("LOG 12 height: 342mm")
    result = SectionAnalyzer(ocr=ocr).process(rectangle, "a.png")
    assert result.detected_height_mm == 342
    assert result.calibration_height_mm == 342
    assert result.height_source == "ocr"


def test_process_explicit_height_skips_ocr(rectangle):
    ocr = FakeOCR("342mm")
    result = SectionAnalyzer(ocr=ocr).process(rectangle, "a.png", height_mm=120.0)
    assert ocr.calls == 0
    assert result.calibration_height_mm == 120.0
    assert result.detected_height_mm is None


def test_process_falls_back_to_default(rectangle):
    result = SectionAnalyzer(ocr=FakeOCR("nothing"), fallback_height_mm=300.0).process(rectangle, "a.png")
    assert result.height_source == "default"
    assert result.calibration_height_mm == 300.0
    assert result.detected_height_mm is None


def test_process_without_fallback_fails(rectangle):
    with pytest.raises(InvalidCalibration):
        SectionAnalyzer(ocr=None, fallback_height_mm=None).process(rectangle, "a.png")


def test_process_decodes_bytes(rectangle):
    buffer = io.BytesIO()
    Image.fromarray(rectangle).save(buffer, format="PNG")
    from_bytes = SectionAnalyzer().process(buffer.getvalue(), "a.png", 300.0)
    from_array = SectionAnalyzer().process(rectangle, "a.png", 300.0)
    assert from_bytes.area_mm2 == from_array.area_mm2
    with pytest.raises(DecodeError):
        SectionAnalyzer().process(b"garbage", "b.png", 300.0)


def test_16bit_raster_is_measured():
    deep = np.full((120, 100), 60000, dtype=np.uint16)
    deep[30:90, 20:60] = 10000
    result = analyze_log_section(deep, 300.0)
    assert result.area_mm2 == pytest.approx(60000.0)
    assert result.centroid_x_mm == pytest.approx(200.0)


def test_region_mask_is_built_once(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("mask rebuilt while annotating")

    monkeypatch.setattr(annotation, "build_region_mask", fail)
    assert analyze_log_section(make_rectangle(), 300.0).area_mm2 == pytest.approx(60000.0)
