import json
import subprocess
from types import SimpleNamespace

import pytest

from terrainprofile.adapters import gdal_cli
from terrainprofile.adapters.gdal_cli import GdalInfoMetadata, GdalLocationInfoSampler
from terrainprofile.contracts.errors import DatasetError, MetadataError
from terrainprofile.contracts.geo import GeoCoordinate, GeoTransform


class _FakeRun:
    """Reemplazo de subprocess.run: registra args/stdin y entrega un resultado fijo."""
    def __init__(self, stdout="", stderr="", returncode=0, exc=None):
        self.result = SimpleNamespace(stdout=stdout, stderr=stderr, returncode=returncode)
        self.exc = exc
        self.calls = []

    def __call__(self, args, **kw):
        self.calls.append((args, kw))
        if self.exc is not None:
            raise self.exc
        return self.result


@pytest.fixture
def fake_run(monkeypatch):
    def _install(**kw):
        fr = _FakeRun(**kw)
        monkeypatch.setattr(gdal_cli.subprocess, "run", fr)
        return fr
    return _install


def test_gdalinfo_parses_geotransform(fake_run):
    fr = fake_run(stdout=json.dumps({"geoTransform": [-71.0, 0.5, 0.0, -33.0, 0.0, -0.5], "size": [10, 10]}))
    gt = GdalInfoMetadata(gdalinfo_exe="/opt/gdal/bin/gdalinfo", timeout_s=5).get_transform("/data/dem.tif")
    assert gt == GeoTransform(-71.0, 0.5, 0.0, -33.0, 0.0, -0.5)
    args, kw = fr.calls[0]
    assert args == ["/opt/gdal/bin/gdalinfo", "-json", "/data/dem.tif"]
    assert kw["timeout"] == 5


def test_gdalinfo_uses_path_by_default(fake_run):
    fr = fake_run(stdout=json.dumps({"geoTransform": [0, 1, 0, 0, 0, -1]}))
    GdalInfoMetadata().get_transform("x.tif")
    assert fr.calls[0][0][0] == "gdalinfo"


@pytest.mark.parametrize("kw", [
    {"returncode": 1, "stderr": "ERROR 4: not recognized as a supported file format"},
    {"exc": FileNotFoundError("gdalinfo")},
    {"exc": subprocess.TimeoutExpired(cmd="gdalinfo", timeout=1)},
])
def test_gdalinfo_unreadable_dataset(fake_run, kw):
    fake_run(**kw)
    with pytest.raises(DatasetError):
        GdalInfoMetadata().get_transform("x.tif")


@pytest.mark.parametrize("stdout", ["{no json", json.dumps({"size": [1, 1]}), json.dumps({"geoTransform": [0, 1, 0]})])
def test_gdalinfo_unusable_metadata(fake_run, stdout):
    fake_run(stdout=stdout)
    with pytest.raises(MetadataError):
        GdalInfoMetadata().get_transform("x.tif")


def test_gdalinfo_exists(tmp_path):
    f = tmp_path / "dem.tif"
    f.write_bytes(b"")
    port = GdalInfoMetadata()
    assert port.exists(str(f))
    assert not port.exists(str(tmp_path / "nope.tif"))


def test_locationinfo_batches_in_one_call(fake_run):
    fr = fake_run(stdout="12.5\n-3\n\nabc\n")
    coords = [GeoCoordinate(0.0, 0.0), GeoCoordinate(1.5, -2.0), GeoCoordinate(99.0, 99.0), GeoCoordinate(2.0, 2.0)]
    values = GdalLocationInfoSampler().get_values("dem.tif", coords)
    assert values == [12.5, -3.0, None, None]
    assert len(fr.calls) == 1
    args, kw = fr.calls[0]
    assert args == ["gdallocationinfo", "-valonly", "-geoloc", "dem.tif"]
    assert kw["input"] == "0.0 0.0\n1.5 -2.0\n99.0 99.0\n2.0 2.0\n"


def test_locationinfo_off_raster_point_keeps_rest_of_batch(fake_run):
    # gdallocationinfo sale con 1 si algún punto cae fuera, pero imprime una línea por punto
    fake_run(stdout="10\n11\n\n", stderr="ERROR 1: Location is off this file!", returncode=1)
    coords = [GeoCoordinate(0, 0), GeoCoordinate(1, 0), GeoCoordinate(99, 0)]
    assert GdalLocationInfoSampler().get_values("x.tif", coords) == [10.0, 11.0, None]


def test_locationinfo_failed_process_with_partial_output_degrades(fake_run):
    fake_run(stdout="10\n", returncode=1)
    coords = [GeoCoordinate(0, 0), GeoCoordinate(1, 0), GeoCoordinate(2, 0)]
    assert GdalLocationInfoSampler().get_values("x.tif", coords) == [None, None, None]


def test_locationinfo_keeps_trailing_blank_lines(fake_run):
    fake_run(stdout="7\n\n\n")
    values = GdalLocationInfoSampler().get_values("dem.tif", [GeoCoordinate(0, 0)] * 3)
    assert values == [7.0, None, None]


@pytest.mark.parametrize("kw", [
    {"returncode": 1, "stderr": "boom"},
    {"exc": OSError("no exe")},
    {"exc": subprocess.TimeoutExpired(cmd="gdallocationinfo", timeout=1)},
])
def test_locationinfo_total_failure_degrades_to_nodata(fake_run, kw):
    fake_run(**kw)
    values = GdalLocationInfoSampler().get_values("dem.tif", [GeoCoordinate(0, 0), GeoCoordinate(1, 1)])
    assert values == [None, None]


def test_locationinfo_empty_batch_skips_process(fake_run):
    fr = fake_run()
    assert GdalLocationInfoSampler().get_values("dem.tif", []) == []
    assert fr.calls == []
