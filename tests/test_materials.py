"""Unit tests for materials and surface scattering.

Tests cover:
- Material validation and serialization
- Branch selection by the diffuse probability
- Lambertian hemisphere sampling
- Mirror and glossy reflection
- Dielectric medium tracking, refraction, and total internal reflection
"""

import math

import numpy as np
import pytest

from pathtracer.core.ray import Ray, dot, length, make_ray, normalize, reflect, vec3
from pathtracer.geometry.sphere import Hit, Sphere
from pathtracer.materials import (
    AIR,
    Material,
    refractive_indices,
    sample_dielectric,
    sample_lambertian,
    sample_metal,
    scatter,
)


def floor_hit(material, point=(0.0, 0.0, 0.0), normal=(0.0, 0.0, 1.0)):
    """A hit record on a horizontal surface carrying material."""
    geometry = Sphere(center=(0.0, 0.0, -1.0), radius=1.0, material=material)
    return Hit(point=vec3(*point), normal=vec3(*normal), geometry=geometry, t=1.0)


class TestMaterial:
    """Tests for the Material record."""

    def test_defaults(self):
        """Test the default material is a black diffuser in air."""
        m = Material()
        assert np.array_equal(m.emittance, (0.0, 0.0, 0.0))
        assert np.array_equal(m.reflectance, (0.0, 0.0, 0.0))
        assert m.eta == 1.0
        assert m.diffuse == 1.0
        assert m.glossy == 0.0
        assert m.dielectric is False
        assert not m.is_emissive

    def test_is_emissive(self):
        """Test any positive emittance channel marks an emitter."""
        assert Material(emittance=(0.0, 0.0, 0.1)).is_emissive

    def test_arrays_are_read_only(self):
        """Test shared material colors cannot be mutated."""
        m = Material(reflectance=(0.5, 0.5, 0.5))
        with pytest.raises(ValueError):
            m.reflectance[0] = 1.0

    def test_negative_emittance_rejected(self):
        """Test emittance must be non-negative."""
        with pytest.raises(ValueError, match="non-negative"):
            Material(emittance=(-1.0, 0.0, 0.0))

    def test_non_positive_eta_rejected(self):
        """Test the refractive index must be positive."""
        with pytest.raises(ValueError, match="positive"):
            Material(eta=0.0)

    @pytest.mark.parametrize("field", ["diffuse", "glossy"])
    def test_probabilities_in_unit_interval(self, field):
        """Test diffuse and glossy must lie in [0, 1]."""
        with pytest.raises(ValueError, match=r"\[0, 1\]"):
            Material(**{field: 1.5})

    def test_dict_round_trip(self):
        """Test to_dict/from_dict preserve every field."""
        m = Material(emittance=(1, 2, 3), reflectance=(0.1, 0.2, 0.3), eta=1.33, diffuse=0.25, glossy=0.5, dielectric=True)
        copy = Material.from_dict(m.to_dict())
        assert copy.to_dict() == m.to_dict()

    def test_from_dict_unknown_key(self):
        """Test unknown material keys are reported."""
        with pytest.raises(ValueError, match="roughness"):
            Material.from_dict({"roughness": 0.5})

    def test_identity_equality(self):
        """Test materials compare by identity, as media are tracked by identity."""
        assert Material(eta=1.5) != Material(eta=1.5)


class TestScatterBranches:
    """Tests for the diffuse/specular branch choice."""

    def test_fully_diffuse_stays_on_normal_side(self, rng, white_diffuse):
        """Test diffuse=1 always samples the normal's hemisphere."""
        hit = floor_hit(white_diffuse)
        ray = make_ray(vec3(1, 0, 1), vec3(-1, 0, -1))
        for _ in range(200):
            out = scatter(white_diffuse, ray, hit, rng)
            assert dot(out.direction, hit.normal) >= 0.0

    def test_fully_specular_is_mirror(self, rng, mirror):
        """Test diffuse=0 on a non-dielectric gives the mirror direction."""
        hit = floor_hit(mirror)
        ray = make_ray(vec3(-1, 0, 1), vec3(1, 0, -1))
        for _ in range(20):
            out = scatter(mirror, ray, hit, rng)
            assert np.allclose(out.direction, normalize(vec3(1, 0, 1)))

    def test_mixed_branch_frequency(self, rng):
        """Test the diffuse probability controls how often the diffuse branch is taken."""
        material = Material(reflectance=(1, 1, 1), diffuse=0.3)
        hit = floor_hit(material)
        ray = make_ray(vec3(-1, 0, 1), vec3(1, 0, -1))
        mirror_dir = normalize(vec3(1, 0, 1))
        trials = 4000
        specular = sum(
            np.allclose(scatter(material, ray, hit, rng).direction, mirror_dir) for _ in range(trials)
        )
        assert abs(specular / trials - 0.7) < 0.04

    def test_continuation_starts_at_hit_point(self, rng, white_diffuse):
        """Test the new ray starts at the hit point with unit direction."""
        hit = floor_hit(white_diffuse, point=(3.0, 4.0, 0.0))
        out = scatter(white_diffuse, make_ray(vec3(3, 4, 1), vec3(0, 0, -1)), hit, rng)
        assert np.allclose(out.origin, (3.0, 4.0, 0.0))
        assert abs(length(out.direction) - 1.0) < 1e-9


class TestLambertian:
    """Tests for Lambertian sampling."""

    def test_samples_around_reported_normal(self, rng, white_diffuse):
        """Test the hemisphere follows the normal even for rays from behind."""
        hit = floor_hit(white_diffuse)
        ray = make_ray(vec3(0, 0, -1), vec3(0, 0, 1))
        for _ in range(200):
            out = sample_lambertian(ray, hit, rng)
            assert out.direction[2] >= 0.0

    def test_keeps_medium(self, rng, white_diffuse, glass):
        """Test a diffuse bounce stays in the incoming medium."""
        ray = Ray(vec3(0, 0, 1), vec3(0, 0, -1), medium=glass)
        assert sample_lambertian(ray, floor_hit(white_diffuse), rng).medium is glass


class TestMetal:
    """Tests for mirror and glossy reflection."""

    def test_perfect_mirror_draws_no_randomness(self, mirror):
        """Test glossy=0 reflects without consuming random numbers."""
        rng = np.random.default_rng(7)
        ray = make_ray(vec3(-1, 0, 1), vec3(1, 0, -1))
        sample_metal(mirror, ray, floor_hit(mirror), rng)
        assert rng.random() == np.random.default_rng(7).random()

    def test_glossy_blends_toward_hemisphere(self, rng):
        """Test glossy reflections scatter around the mirror direction."""
        material = Material(reflectance=(1, 1, 1), diffuse=0.0, glossy=0.3)
        hit = floor_hit(material)
        ray = make_ray(vec3(-1, 0, 1), vec3(1, 0, -1))
        mirror_dir = reflect(ray.direction, hit.normal)
        directions = [sample_metal(material, ray, hit, rng).direction for _ in range(200)]
        for d in directions:
            assert abs(length(d) - 1.0) < 1e-9
            assert dot(d, hit.normal) >= 0.0
            assert dot(d, mirror_dir) > 0.5
        assert not all(np.allclose(d, mirror_dir) for d in directions)

    def test_glossy_one_is_hemisphere(self, rng):
        """Test glossy=1 ignores the mirror direction entirely."""
        material = Material(reflectance=(1, 1, 1), diffuse=0.0, glossy=1.0)
        hit = floor_hit(material)
        ray = make_ray(vec3(-1, 0, 1), vec3(1, 0, -1))
        xs = [sample_metal(material, ray, hit, rng).direction[0] for _ in range(2000)]
        assert abs(np.mean(xs)) < 0.05


class TestDielectric:
    """Tests for dielectric reflection and refraction."""

    def test_entering_indices(self, glass):
        """Test a ray in the ambient medium enters the glass."""
        ray = make_ray(vec3(0, 0, 1), vec3(0, 0, -1))
        eta1, eta2, medium = refractive_indices(glass, ray, AIR)
        assert (eta1, eta2) == (1.0, 1.5)
        assert medium is glass

    def test_exiting_indices(self, glass):
        """Test a ray inside the glass exits to the ambient medium."""
        water = Material(eta=1.33)
        ray = Ray(vec3(0, 0, -1), vec3(0, 0, 1), medium=glass)
        eta1, eta2, medium = refractive_indices(glass, ray, water)
        assert (eta1, eta2) == (1.5, 1.33)
        assert medium is None

    def test_refracted_ray_carries_new_medium(self, glass):
        """Test refraction at normal incidence enters the glass undeviated."""
        hit = floor_hit(glass)
        ray = make_ray(vec3(0, 0, 1), vec3(0, 0, -1))
        refracted = 0
        for seed in range(200):
            out = sample_dielectric(glass, ray, hit, np.random.default_rng(seed), AIR)
            if out.medium is glass:
                refracted += 1
                assert np.allclose(out.direction, (0.0, 0.0, -1.0))
            else:
                assert out.medium is None
                assert np.allclose(out.direction, (0.0, 0.0, 1.0))
        # Schlick reflectance at normal incidence is 0.04
        assert refracted > 170

    def test_exit_returns_to_ambient(self, glass):
        """Test a refracted exiting ray travels in the ambient medium again."""
        hit = floor_hit(glass)
        ray = Ray(vec3(0, 0, -1), vec3(0, 0, 1), medium=glass)
        outcomes = {sample_dielectric(glass, ray, hit, np.random.default_rng(s), AIR).medium is None for s in range(50)}
        assert True in outcomes

    def test_total_internal_reflection(self, glass, rng):
        """Test a steep exiting ray always reflects and stays inside."""
        hit = floor_hit(glass)
        a = math.radians(60.0)
        ray = Ray(vec3(0, 0, -1), vec3(math.sin(a), 0, math.cos(a)), medium=glass)
        for _ in range(50):
            out = sample_dielectric(glass, ray, hit, rng, AIR)
            assert out.medium is glass
            assert out.direction[2] < 0.0

    def test_scatter_routes_dielectric(self, glass, rng):
        """Test scatter uses the dielectric branch for dielectric materials."""
        hit = floor_hit(glass)
        ray = make_ray(vec3(0, 0, 1), vec3(0, 0, -1))
        media = {scatter(glass, ray, hit, rng).medium is glass for _ in range(50)}
        assert True in media
