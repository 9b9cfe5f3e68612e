from blocstore.point import Point


def test_default_is_origin():
    assert Point().as_tuple() == (0.0, 0.0)


def test_set_and_as_tuple():
    point = Point()
    point.set(2.5, -4.0)
    assert point.as_tuple() == (2.5, -4.0)


def test_set_from_copies_coordinates():
    source = Point(1.5, 7.25)
    target = Point()
    target.set_from(source)
    assert target == source
    source.set(0.0, 0.0)
    assert target.as_tuple() == (1.5, 7.25)


def test_reset_returns_to_origin():
    point = Point(3.0, 9.0)
    point.reset()
    assert point == Point()


def test_set_converts_to_float():
    point = Point()
    point.set(3, 4)
    assert isinstance(point.x, float) and point.as_tuple() == (3.0, 4.0)