import pytest

from terrainprofile.contracts.core import DistanceMethod
from terrainprofile.contracts.errors import DatasetError, InputError, InternalError, MetadataError
from terrainprofile.contracts.geo import GeoTransform
from terrainprofile.services.distance import haversine_m
from terrainprofile.services.metadata_cache import MetadataCache
from tests.factories import FakeMetadata, FakeSampler, UNIT_GT, make_service


def test_end_to_end_unit_transform(tmp_path):
    sampler = FakeSampler()
    svc = make_service(tmp_path, sampler=sampler)
    prof = svc.compute_profile([0.0, 0.0], [3.0, 0.0], 1)

    coords = [tuple(p.coordinates) for p in prof.points]
    assert coords == [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)]
    assert prof.elevations() == (100.0, 101.0, 102.0, 103.0)

    d = prof.distances()
    assert d[0] == 0.0
    assert all(b > a for a, b in zip(d, d[1:]))
    assert d[-1] == prof.summary.total_distance_m
    assert prof.summary.total_points == 4
    assert prof.summary.sampling_interval == 1
    assert prof.summary.dataset == str(tmp_path.resolve() / "dem.tif")
    # un solo lote por request
    assert len(sampler.batches) == 1


def test_distances_match_haversine(tmp_path):
    svc = make_service(tmp_path)
    prof = svc.compute_profile([0.0, 0.0], [2.0, 0.0])
    assert prof.points[1].distance_m == round(haversine_m((0.0, 0.0), (1.0, 0.0)), 2)


def test_planar_method_per_request(tmp_path):
    svc = make_service(tmp_path)
    prof = svc.compute_profile([0.0, 0.0], [1.0, 0.0], method="planar")
    assert prof.summary.total_distance_m == 111_320.0
    assert prof.summary.distance_method is DistanceMethod.PLANAR


def test_default_method_from_settings(tmp_path):
    svc = make_service(tmp_path, distance_method="planar")
    prof = svc.compute_profile([0.0, 0.0], [1.0, 0.0])
    assert prof.summary.distance_method is DistanceMethod.PLANAR


def test_degenerate_request_single_point(tmp_path):
    svc = make_service(tmp_path)
    prof = svc.compute_profile([2.2, -1.1], [1.9, -0.8])
    assert len(prof.points) == 1
    assert prof.points[0].distance_m == 0.0
    assert prof.summary.total_distance_m == 0.0


def test_interval_two_retains_ceil_half(tmp_path):
    svc = make_service(tmp_path)
    prof = svc.compute_profile([0.0, 0.0], [6.0, 0.0], 2)
    assert [p.coordinates.lon for p in prof.points] == [0.0, 2.0, 4.0, 6.0]
    prof5 = svc.compute_profile([0.0, 0.0], [5.0, 0.0], 2)
    assert len(prof5.points) == 3
    assert prof5.points[-1].coordinates.lon == 4.0


def test_distance_accumulates_between_retained_samples_only(tmp_path):
    svc = make_service(tmp_path)
    full = svc.compute_profile([0.0, 0.0], [4.0, 0.0], 1)
    sparse = svc.compute_profile([0.0, 0.0], [4.0, 0.0], 2)
    assert sparse.summary.total_distance_m == pytest.approx(full.summary.total_distance_m, abs=0.02)


def test_pixel_space_uses_transform(tmp_path):
    gt = GeoTransform(-71.0, 0.5, 0.0, -33.0, 0.0, -0.5)
    svc = make_service(tmp_path, gt)
    prof = svc.compute_profile([-71.1, -33.1], [-69.9, -33.9])
    first, last = prof.points[0].coordinates, prof.points[-1].coordinates
    # (-71.1,-33.1) -> pixel (0,0); (-69.9,-33.9) -> pixel (2,2)
    assert tuple(first) == (-71.0, -33.0)
    assert tuple(last) == (-70.0, -34.0)
    assert len(prof.points) == 3


@pytest.mark.parametrize("a,b,interval", [
    ([0.0], [1.0, 1.0], 1),
    ([0.0, 0.0], [1.0, 1.0, 1.0], 1),
    ([0.0, 0.0], [1.0, 1.0], 0),
    ([0.0, 0.0], [1.0, 1.0], -2),
])
def test_input_errors_before_any_collaborator_call(tmp_path, a, b, interval):
    meta = FakeMetadata({})
    sampler = FakeSampler()
    svc = make_service(tmp_path, metadata=meta, sampler=sampler)
    with pytest.raises(InputError):
        svc.compute_profile(a, b, interval)
    assert meta.exists_calls == [] and meta.calls == []
    assert sampler.batches == []


def test_unknown_method_is_input_error(tmp_path):
    with pytest.raises(InputError):
        make_service(tmp_path).compute_profile([0, 0], [1, 0], method="geodesic")


def test_missing_dataset(tmp_path):
    svc = make_service(tmp_path)
    with pytest.raises(DatasetError):
        svc.compute_profile([0, 0], [1, 0], dataset="otro.tif")


def test_existence_checked_even_when_cached(tmp_path):
    meta = FakeMetadata({str(tmp_path.resolve() / "dem.tif"): UNIT_GT})
    svc = make_service(tmp_path, metadata=meta)
    svc.compute_profile([0, 0], [1, 0])
    svc.compute_profile([0, 0], [2, 0])
    assert len(meta.calls) == 1
    assert len(meta.exists_calls) == 2


def test_metadata_errors_propagate(tmp_path):
    meta = FakeMetadata({str(tmp_path.resolve() / "dem.tif"): UNIT_GT}, error=MetadataError("sin geoTransform"))
    with pytest.raises(MetadataError):
        make_service(tmp_path, metadata=meta).compute_profile([0, 0], [1, 0])


def test_zero_pixel_size_rejected_and_not_cached(tmp_path):
    cache = MetadataCache()
    svc = make_service(tmp_path, GeoTransform(0, 0.0, 0, 0, 0, -1), cache=cache)
    with pytest.raises(MetadataError):
        svc.compute_profile([0, 0], [1, 0])
    assert len(cache) == 0


def test_sample_error_degrades_to_nodata(tmp_path):
    svc = make_service(tmp_path, sampler=FakeSampler(fail=True))
    prof = svc.compute_profile([0, 0], [2, 0])
    assert prof.elevations() == (None, None, None)
    assert prof.summary.total_distance_m > 0


def test_per_point_nodata_is_kept(tmp_path):
    sampler = FakeSampler(fn=lambda lon, lat: None if lon == 1.0 else 5.0)
    prof = make_service(tmp_path, sampler=sampler).compute_profile([0, 0], [2, 0])
    assert prof.elevations() == (5.0, None, 5.0)


def test_short_sampler_result_is_internal_error(tmp_path):
    svc = make_service(tmp_path, sampler=FakeSampler(drop=1))
    with pytest.raises(InternalError):
        svc.compute_profile([0, 0], [3, 0])


def test_unexpected_failure_wrapped_as_internal_error(tmp_path):
    sampler = FakeSampler(fn=lambda lon, lat: 1 / 0)
    with pytest.raises(InternalError) as ei:
        make_service(tmp_path, sampler=sampler).compute_profile([0, 0], [1, 0])
    assert isinstance(ei.value.__cause__, ZeroDivisionError)


def test_reverse_direction_same_total_distance(tmp_path):
    svc = make_service(tmp_path)
    fwd = svc.compute_profile([0, 0], [5, -3], method="planar")
    rev = svc.compute_profile([5, -3], [0, 0], method="planar")
    assert fwd.summary.total_distance_m == pytest.approx(rev.summary.total_distance_m, abs=0.01)
