""" Representation of a single image for the lighthouse display. The display
    is a grid of windows, each of which can be lit with an arbitrary RGB
    color; a :class:`Frame` is the full set of colors for every window.
"""

import random


columns = 28
rows = 14
channels = 3
size = columns * rows * channels


class Color:
    """ An RGB color, with each channel in the range 0-255 inclusive.
    """

    def __init__(self, red, green, blue):

        for channel in (red, green, blue):
            if isinstance(channel, bool) or not isinstance(channel, int):
                raise TypeError('color channels must be integers: ' + repr(channel))
            if channel < 0 or channel > 255:
                raise ValueError('color channel out of range: ' + repr(channel))

        self.red = red
        self.green = green
        self.blue = blue


    def __eq__(self, other):
        if isinstance(other, Color):
            return tuple(self) == tuple(other)
        return NotImplemented


    def __hash__(self):
        return hash(tuple(self))


    def __iter__(self):
        return iter((self.red, self.green, self.blue))


    def __repr__(self):
        return 'Color(%d, %d, %d)' % (self.red, self.green, self.blue)


    @classmethod
    def random(cls):
        return cls(random.randrange(256), random.randrange(256), random.randrange(256))


# end of class Color


Color.BLACK = Color(0, 0, 0)
Color.WHITE = Color(255, 255, 255)
Color.RED = Color(255, 0, 0)
Color.GREEN = Color(0, 255, 0)
Color.BLUE = Color(0, 0, 255)



class Frame:
    """ A mutable grid of :class:`Color` values, *columns* wide and *rows*
        tall. Individual windows are addressed as ``frame[x, y]``. The raw
        *data* is the on-the-wire representation: one byte per channel,
        row-major, starting from the top left window.

        A new :class:`Frame` is filled with the *fill* color, or black if no
        color is specified. Alternatively, the exact byte contents can be
        provided as *data*; it must be exactly :data:`size` bytes long.
    """

    def __init__(self, fill=None, data=None):

        if data is not None:
            if fill is not None:
                raise ValueError('specify either a fill color or raw data, not both')

            data = bytes(data)
            if len(data) != size:
                raise ValueError('frame data must be %d bytes, got %d' % (size, len(data)))

            self.data = bytearray(data)
        else:
            if fill is None:
                fill = Color.BLACK

            self.data = bytearray(bytes(tuple(fill)) * (columns * rows))


    def _offset(self, position):

        try:
            x, y = position
        except (TypeError, ValueError):
            raise TypeError('frame positions are (x, y) pairs: ' + repr(position))

        if x < 0 or x >= columns or y < 0 or y >= rows:
            raise IndexError('position outside the frame: ' + repr(position))

        return (y * columns + x) * channels


    def __getitem__(self, position):
        offset = self._offset(position)
        return Color(*self.data[offset:offset + channels])


    def __setitem__(self, position, color):
        offset = self._offset(position)
        self.data[offset:offset + channels] = bytes(tuple(color))


    def __bytes__(self):
        return bytes(self.data)


    def __eq__(self, other):
        if isinstance(other, Frame):
            return self.data == other.data
        return NotImplemented


    __hash__ = None


    def __iter__(self):
        """ Iterate over every window, row by row, yielding the color of each
            window in turn.
        """

        for y in range(rows):
            for x in range(columns):
                yield self[x, y]


    def __repr__(self):
        return 'Frame(%d bytes)' % (len(self.data))


    def fill(self, color):
        self.data[:] = bytes(tuple(color)) * (columns * rows)


    @classmethod
    def random(cls):
        """ Return a new :class:`Frame` with every window set to a randomly
            chosen color.
        """

        return cls(data=random.randbytes(size))


# end of class Frame


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
