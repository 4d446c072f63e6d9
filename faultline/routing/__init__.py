"""Faultline error routing — delivers error reports to all configured sinks.

Sinks are a closed set of delivery targets: a chat channel message, a
chat webhook execution, or a local file.  The ErrorDispatcher formats
each report once per sink and fans it out to every sink, recording one
outcome per sink.  A failing sink never blocks the others.
"""
