from typing import List, Optional


class Interval:
    """
    A genomic range given by an integer start and end position. The size of the interval is measured
    as the distance between its bounds (see :meth:`span`) so that a single position has no width
    """

    def __init__(self, start: int, end: Optional[int] = None):
        """
        Args:
            start: the start of the interval
            end: the end of the interval, defaults to the start
        """
        self.start = int(start)
        self.end = int(end) if end is not None else self.start
        if self.start > self.end:
            raise AttributeError('interval start > end is not allowed', self.start, self.end)

    def __and__(self, other):  # intersection
        """the intersection of two intervals

        Example:
            >>> Interval(1, 10) & Interval(5, 50)
            Interval(5, 10)
            >>> Interval(1, 2) & Interval(10, 11)
            None
        """
        return Interval.intersection(self, other)

    def __or__(self, other):  # union
        """the union of two intervals

        Example:
            >>> Interval(1, 10) | Interval(5, 50)
            Interval(1, 50)
        """
        return Interval.union(self, other)

    def __getitem__(self, index):
        try:
            index = int(index)
        except ValueError:
            raise IndexError('index input accessor must be an integer', index)
        if index == 0:
            return self.start
        elif index == 1:
            return self.end
        raise IndexError('index input accessor is out of bounds: 1 or 2 only', index)

    def __repr__(self):
        return '{}({}, {})'.format(self.__class__.__name__, self.start, self.end)

    def __eq__(self, other):
        try:
            return self[0] == other[0] and self[1] == other[1]
        except (TypeError, IndexError):
            return False

    def __hash__(self):
        return hash((self[0], self[1]))

    def __contains__(self, other):
        try:
            if other[0] >= self[0] and other[1] <= self[1]:
                return True
        except TypeError:
            if other >= self[0] and other <= self[1]:
                return True
        return False

    @classmethod
    def span(cls, interval) -> int:
        """
        Example:
            >>> Interval.span((1000, 2000))
            1000
            >>> Interval.span((5, 5))
            0
        """
        return interval[1] - interval[0]

    @classmethod
    def overlaps(cls, first, other) -> bool:
        """
        checks if two intervals have any portion of their given ranges in common

        Example:
            >>> Interval.overlaps((1, 4), (5, 7))
            False
            >>> Interval.overlaps((1, 10), (10, 11))
            True
        """
        if first[1] < other[0]:
            return False
        elif first[0] > other[1]:
            return False
        return True

    @classmethod
    def union(cls, *intervals):
        """
        returns the smallest interval covering all the input intervals

        Example:
            >>> Interval.union((1, 2), (4, 6), (20, 21))
            Interval(1, 21)
        """
        if len(intervals) < 1:
            raise AttributeError('cannot compute the union of an empty set of intervals')
        return Interval(min([i[0] for i in intervals]), max([i[1] for i in intervals]))

    @classmethod
    def intersection(cls, *intervals):
        """
        returns None if there is no intersection

        Example:
            >>> Interval.intersection((1, 10), (2, 8), (7, 15))
            Interval(7, 8)
            >>> Interval.intersection((1, 2), (5, 9))
            None
        """
        if len(intervals) < 1:
            raise AttributeError('cannot compute the intersection of an empty set of intervals')
        low = max([i[0] for i in intervals])
        high = min([i[1] for i in intervals])
        if low > high:
            return None
        return Interval(low, high)

    @classmethod
    def reciprocal_overlap(cls, first, other) -> float:
        """
        The size of the intersection of two intervals divided by the size of their union.
        Two single positions at the same coordinate overlap completely

        Example:
            >>> Interval.reciprocal_overlap((1000, 2000), (1050, 1950))
            0.9
            >>> Interval.reciprocal_overlap((1, 10), (20, 30))
            0.0
        """
        intersection = cls.intersection(first, other)
        if intersection is None:
            return 0.0
        union = cls.span(cls.union(first, other))
        if union == 0:
            return 1.0
        return cls.span(intersection) / union

    @classmethod
    def min_nonoverlapping(cls, *intervals) -> List['Interval']:
        """
        for a list of intervals, orders them and merges any overlap to return a list of non-overlapping intervals
        O(nlogn)

        Example:
            >>> Interval.min_nonoverlapping((1, 10), (7, 8), (6, 14), (17, 20))
            [Interval(1, 14), Interval(17, 20)]
        """
        if len(intervals) == 0:
            return []
        intervals = sorted(list(intervals), key=lambda x: (x[0], x[1]))
        new_intervals = [Interval(intervals[0][0], intervals[0][1])]
        for i in intervals[1:]:
            if Interval.overlaps(new_intervals[-1], i):
                new_intervals[-1] = new_intervals[-1] | i
            else:
                new_intervals.append(Interval(i[0], i[1]))
        return new_intervals
