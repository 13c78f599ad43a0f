import lighthouse
import pytest

from lighthouse.frame import Color, Frame


def test_geometry():

    assert lighthouse.frame.columns == 28
    assert lighthouse.frame.rows == 14
    assert lighthouse.frame.size == 28 * 14 * 3

    frame = Frame()
    assert len(bytes(frame)) == lighthouse.frame.size
    assert bytes(frame) == bytes(lighthouse.frame.size)


def test_fill():

    frame = Frame(Color.RED)

    for color in frame:
        assert color == Color.RED

    frame.fill(Color(1, 2, 3))
    assert bytes(frame)[:6] == bytes((1, 2, 3, 1, 2, 3))


def test_positions():

    frame = Frame()
    frame[0, 0] = Color.WHITE
    frame[27, 13] = (10, 20, 30)

    assert frame[0, 0] == Color.WHITE
    assert frame[27, 13] == Color(10, 20, 30)
    assert frame[1, 0] == Color.BLACK

    # Row-major, three bytes per window.

    data = bytes(frame)
    assert data[0:3] == bytes((255, 255, 255))
    assert data[-3:] == bytes((10, 20, 30))

    with pytest.raises(IndexError):
        frame[28, 0]

    with pytest.raises(IndexError):
        frame[0, -1]

    with pytest.raises(TypeError):
        frame[3]


def test_raw_data():

    data = bytes(range(256)) * 4 + bytes(lighthouse.frame.size - 1024)
    frame = Frame(data=data)

    assert bytes(frame) == data
    assert frame == Frame(data=data)
    assert frame != Frame()

    with pytest.raises(ValueError):
        Frame(data=b'\x00' * 10)

    with pytest.raises(ValueError):
        Frame(Color.RED, data=data)


def test_color_validation():

    with pytest.raises(ValueError):
        Color(256, 0, 0)

    with pytest.raises(ValueError):
        Color(0, -1, 0)

    with pytest.raises(TypeError):
        Color(0, 0, 1.5)

    assert tuple(Color(1, 2, 3)) == (1, 2, 3)
    assert Color(1, 2, 3) == Color(1, 2, 3)


def test_random():

    frame = Frame.random()
    assert len(bytes(frame)) == lighthouse.frame.size

    color = Color.random()
    for channel in color:
        assert 0 <= channel <= 255


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
