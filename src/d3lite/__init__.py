"""
d3lite - D3-style selections, data joins and scales for Python

Build SVG (or any XML) documents declaratively: select nodes, join them to
data by index, create elements for the data that has none yet, and set
attributes from constants or functions of each datum.

Features:
- Selections: select / select_all / append / attr / style / text
- Data join: data() pairs values with nodes by position, enter() yields
  placeholders for the values without a node
- Scales: linear and band scales with fluent configuration
- Aggregates: max / min / extent that skip None and NaN
- lxml-backed documents with SVG output and Jupyter display

Usage:
    import d3lite

    doc = d3lite.Document.create(d3lite.DocumentConfig(width=320, height=240))
    values = [4, 8, 15, 16, 23, 42]

    x = d3lite.scale_band().domain(list(range(len(values)))).range([0, 320]).padding(0.1)
    y = d3lite.scale_linear().domain([0, d3lite.max(values)]).range([240, 0])

    bars = (d3lite.select(doc).select_all("rect")
            .data(values)
            .enter().append("rect")
            .attr("x", lambda d, i: x(i))
            .attr("y", y)
            .attr("width", x.bandwidth())
            .attr("height", lambda d: 240 - y(d)))

    doc.save_svg("bars.svg")
"""

import logging

from .array import extent, max, min
from .document import Document, DocumentConfig, SVG_NS
from .scale import BandScale, LinearScale, scale_band, scale_linear, ticks
from .selection import EnterNode, PendingNodeError, Selection, select

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__author__ = "Tim Nelson"

__all__ = ['select', 'Selection', 'EnterNode', 'PendingNodeError', 'Document', 'DocumentConfig',
           'SVG_NS', 'scale_linear', 'scale_band', 'LinearScale', 'BandScale', 'ticks',
           'max', 'min', 'extent']
