# almond/utils.py


def parse_complex(s: str) -> complex:
    """
    Parse strings like '-1-0.3j' or '0.25+0j' into a complex number.
    Plain reals ('-0.75') are accepted too.
    """
    s = s.strip().lower().replace(" ", "").replace("i", "j")
    if s.endswith("j"):
        return complex(s)
    return complex(float(s), 0.0)
