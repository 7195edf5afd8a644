import math

import numpy as np
import pytest

from vecalc import values
from vecalc.errors import TypeMismatchError
from vecalc.values import Number, Vector


def test_scalar_arithmetic():
    a, b = Number(7), Number(2)
    assert values.add(a, b) == Number(9)
    assert values.subtract(a, b) == Number(5)
    assert values.multiply(a, b) == Number(14)
    assert values.divide(a, b) == Number(3.5)
    assert values.power(a, b) == Number(49)


def test_numbers_are_float32():
    n = Number(0.1)
    assert n.value.dtype == np.float32
    assert str(n) == "0.1"
    assert Vector([0.1, 1]).components.dtype == np.float32


def test_vector_add_subtract_componentwise():
    a, b = Vector([1, 2, 3]), Vector([4, 5, 6])
    assert values.add(a, b) == Vector([5, 7, 9])
    assert values.subtract(b, a) == Vector([3, 3, 3])


def test_vector_length_mismatch_truncates_to_shorter():
    result = values.add(Vector([1, 2, 3]), Vector([1, 1]))
    assert result == Vector([2, 3])
    assert values.dot(Vector([1, 2, 3]), Vector([2, 2])) == Number(6)


def test_add_and_subtract_reject_mixed_variants():
    with pytest.raises(TypeMismatchError, match="Can't add a scalar and a vector"):
        values.add(Number(5), Vector([1, 2]))
    with pytest.raises(TypeMismatchError, match="Can't subtract a scalar and a vector"):
        values.subtract(Vector([1, 2]), Number(5))


def test_multiply_rules():
    assert values.multiply(Number(2), Vector([1, 2])) == Vector([2, 4])
    assert values.multiply(Vector([1, 2]), Number(3)) == Vector([3, 6])
    with pytest.raises(TypeMismatchError, match="Can't multiply two vectors"):
        values.multiply(Vector([1, 2, 3]), Vector([4, 5, 6]))


def test_divide_rules():
    assert values.divide(Vector([2, 4]), Number(2)) == Vector([1, 2])
    with pytest.raises(TypeMismatchError, match="scalar by a vector"):
        values.divide(Number(1), Vector([1, 2]))
    with pytest.raises(TypeMismatchError, match="vector by a vector"):
        values.divide(Vector([1, 2]), Vector([3, 4]))


def test_division_by_zero_follows_ieee():
    assert np.isinf(values.divide(Number(1), Number(0)).value)
    assert np.isnan(values.divide(Number(0), Number(0)).value)


def test_dot_of_orthogonal_vectors_is_zero():
    assert values.dot(Vector([1, 0, 0]), Vector([0, 1, 0])) == Number(0)
    with pytest.raises(TypeMismatchError):
        values.dot(Number(1), Vector([1]))


def test_cross_product():
    assert values.cross(Vector([1, 0, 0]), Vector([0, 1, 0])) == Vector([0, 0, 1])
    assert values.cross(Vector([0, 1, 0]), Vector([1, 0, 0])) == Vector([0, 0, -1])


@pytest.mark.parametrize("lhs,rhs", [
    ([1, 2], [3, 4]),
    ([1, 2, 3], [3, 4]),
    ([1, 2], [3, 4, 5]),
])
def test_cross_product_requires_two_3d_vectors(lhs, rhs):
    with pytest.raises(TypeMismatchError, match="3-dimensional"):
        values.cross(Vector(lhs), Vector(rhs))


def test_power_rejects_vectors():
    with pytest.raises(TypeMismatchError):
        values.power(Vector([1, 2]), Number(2))


def test_magnitude_and_angle():
    assert values.magnitude(Vector([3, 4])) == Number(5)
    angle = values.angle_between(Vector([1, 0]), Vector([0, 1]))
    assert math.isclose(float(angle), math.pi / 2, rel_tol=1e-6)
    with pytest.raises(TypeMismatchError):
        values.magnitude(Number(3))


def test_angle_with_zero_vector_is_nan():
    assert np.isnan(values.angle_between(Vector([0, 0]), Vector([1, 0])).value)


def test_fallible_accessors():
    with pytest.raises(TypeMismatchError):
        Vector([1]).as_number()
    with pytest.raises(TypeMismatchError):
        Number(1).as_vector()
    assert Number(2).as_number() == np.float32(2)


def test_same_variant():
    assert Number(1).same_variant(Number(2))
    assert Vector([]).same_variant(Vector([1, 2]))
    assert not Number(1).same_variant(Vector([1]))


def test_rendering():
    assert str(Number(3)) == "3"
    assert str(Number(-2.5)) == "-2.5"
    assert str(Vector([1, 2, 3])) == "<1, 2, 3>"
    assert str(Vector([0.5])) == "<0.5>"
    assert str(Vector([])) == "<Empty Vector>"


def test_vectors_are_not_resizable_in_place():
    v = Vector([1, 2, 3])
    with pytest.raises(ValueError):
        v.components[0] = 5
    assert v.dims() == 3


def test_is_finite():
    assert Number(1.5).is_finite()
    assert not values.divide(Number(1), Number(0)).is_finite()
    assert Vector([1, 2]).is_finite()
    assert Vector([]).is_finite()
    assert not Vector([1, float("nan")]).is_finite()
