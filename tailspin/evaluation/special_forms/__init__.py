"""Registry of special forms for the Tailspin evaluator.

Special forms are ordinary native procedures that receive their arguments
unevaluated. The interpreter binds each of these names in the global frame;
there is no separate dispatch path in the evaluator.
"""

from tailspin.evaluation.special_forms.begin_form import begin_form
from tailspin.evaluation.special_forms.define_form import define_form
from tailspin.evaluation.special_forms.if_form import if_form
from tailspin.evaluation.special_forms.lambda_form import lambda_form
from tailspin.evaluation.special_forms.let_forms import let_form, let_star_form
from tailspin.evaluation.special_forms.loop_forms import loop_form, recur_form
from tailspin.evaluation.special_forms.quote_form import quote_form
from tailspin.evaluation.special_forms.set_form import set_car_form, set_cdr_form, set_form

SPECIAL_FORMS = {
    "quote": quote_form,
    "define": define_form,
    "set!": set_form,
    "set-car!": set_car_form,
    "set-cdr!": set_cdr_form,
    "if": if_form,
    "lambda": lambda_form,
    "let": let_form,
    "let*": let_star_form,
    "loop": loop_form,
    "recur": recur_form,
    "begin": begin_form,
}
