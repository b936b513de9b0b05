"""Stateless ajax — links, drop-downs, and delegated listeners without a session.

Every request rebuilds the page from its query string. The counter lives
in the ``counter`` page parameter: clicking the link bumps it and
re-renders the label and the link (whose URL now carries the new value).

The colour links share one delegated ``click`` listener on their
container instead of one listener each. The indicating link shows a busy
marker while its request runs.

Run (prints the page):
    python app.py
"""

from perch import (
    AjaxFormComponentUpdatingBehavior,
    AjaxLink,
    Container,
    DropDownChoice,
    EventDelegatingBehavior,
    IndicatingAjaxLink,
    Label,
    Page,
    RequestCycle,
)

COUNTER_PARAM = "counter"
COLORS = ("red", "green", "blue")


class StatelessExamplePage(Page):
    title = "Stateless ajax"

    def __init__(self, params=None):
        super().__init__(params)
        self.set_stateless_hint(True)

        self.add(Label("message", "This page keeps no session state."))

        # -- Counter --

        increment_label = Label("incrementLabel", lambda: self.params.get_int(COUNTER_PARAM, 0))
        increment_label.set_output_markup_id(True)

        def increment(target):
            self.params.set(COUNTER_PARAM, increment_label.text + 1)
            if target is not None:
                target.add(increment_label, increment_link)

        increment_link = AjaxLink("incrementLink", "Increment", on_click=increment, stateless=True)
        self.add(increment_link, increment_label)

        # -- Drop-down --

        selected_value = Label("selectedValue", "")
        selected_value.set_output_markup_id(True)
        select = DropDownChoice("select", ["1", "2", "3"], value="2")

        def select_changed(target):
            selected_value.text = f"Selected value: {select.value}"
            if target is not None:
                target.add(selected_value)

        select.add_behavior(
            AjaxFormComponentUpdatingBehavior("change", on_update=select_changed, stateless=True)
        )
        self.add(select, selected_value)

        # -- Delegated colour links --

        picked = Label("picked", "Pick a colour")
        picked.set_output_markup_id(True)
        colors = Container("colors")
        colors.add_behavior(EventDelegatingBehavior("click"))

        def picker(color):
            def pick(target):
                picked.text = f"Picked {color}"
                if target is not None:
                    target.add(picked)

            return pick

        for color in COLORS:
            colors.add(AjaxLink(color, color.title(), on_click=picker(color), stateless=True))
        self.add(colors, picked)

        # -- Busy indicator --

        slow = IndicatingAjaxLink(
            "indicatingLink", "Slow request", on_click=lambda target: None, stateless=True
        )
        self.add(slow)


app = RequestCycle(StatelessExamplePage)


if __name__ == "__main__":
    print(app.handle("").text)
