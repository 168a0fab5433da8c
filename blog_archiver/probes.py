"""
probes.py - In-page probes evaluated through a RenderSurface

Each probe pairs a stable name with the JavaScript a browser surface runs.
Surfaces that are not browser-backed answer the same probes by name.
"""

from collections import namedtuple

Probe = namedtuple("Probe", ["name", "script"])


VIEWPORT_METRICS = Probe("viewport_metrics", '''(selectors) => {
    let contentWidth = 0;
    for (const selector of selectors) {
        const el = document.querySelector(selector);
        if (!el) continue;
        const style = window.getComputedStyle(el);
        const width = el.getBoundingClientRect().width
            + (parseFloat(style.marginLeft) || 0)
            + (parseFloat(style.marginRight) || 0);
        contentWidth = Math.max(contentWidth, width);
    }

    // Content can overflow outside the named containers
    let documentWidth = 0;
    document.querySelectorAll('body *').forEach(el => {
        const right = el.getBoundingClientRect().right;
        if (right > documentWidth) documentWidth = right;
    });

    const scrollWidth = Math.max(
        document.documentElement.scrollWidth,
        document.body ? document.body.scrollWidth : 0
    );

    return {
        contentWidth: Math.ceil(contentWidth),
        documentWidth: Math.ceil(documentWidth),
        scrollWidth: scrollWidth
    };
}''')


SCROLL_HEIGHT = Probe("scroll_height", '''() => Math.max(
    document.body ? document.body.scrollHeight : 0,
    document.documentElement.scrollHeight
)''')


SCROLL_BY = Probe("scroll_by", '''(distance) => {
    window.scrollBy(0, distance);
    return window.scrollY;
}''')


SCROLL_TO_TOP = Probe("scroll_to_top", '''() => {
    window.scrollTo(0, 0);
    return 0;
}''')


FONTS_READY = Probe("fonts_ready", '''() => document.fonts
    ? document.fonts.ready.then(() => true)
    : true''')


# Forces a full layout pass after style injection
SETTLE_LAYOUT = Probe("settle_layout", '''() => {
    const body = document.body;
    const html = document.documentElement;
    const height = Math.max(
        body ? body.scrollHeight : 0, body ? body.offsetHeight : 0,
        html.clientHeight, html.scrollHeight, html.offsetHeight
    );
    window.scrollTo(0, height);
    window.scrollTo(0, 0);
    return height;
}''')


OVERFLOW_CHECK = Probe("overflow_check", '''(watched) => {
    const html = document.documentElement;
    const viewportWidth = window.innerWidth || html.clientWidth;
    const offenders = [];

    document.querySelectorAll(watched.join(',')).forEach(el => {
        const rect = el.getBoundingClientRect();
        if (rect.right > viewportWidth + 1 || rect.width > viewportWidth + 1) {
            offenders.push({
                tag: el.tagName.toLowerCase(),
                id: el.id || '',
                className: typeof el.className === 'string' ? el.className : '',
                width: Math.round(rect.width),
                right: Math.round(rect.right)
            });
        }
    });

    return {
        hasOverflow: html.scrollWidth > html.clientWidth,
        scrollWidth: html.scrollWidth,
        clientWidth: html.clientWidth,
        viewportWidth: viewportWidth,
        offenders: offenders
    };
}''')


HEADINGS = Probe("headings", '''() => {
    const elements = document.querySelectorAll('h1, h2, h3, h4, h5, h6');
    const headings = [];

    elements.forEach((element, index) => {
        const id = element.id || `heading-${index}`;
        // Make the heading addressable
        if (!element.id) {
            element.id = id;
        }
        headings.push({
            level: parseInt(element.tagName.substring(1)),
            text: element.textContent.trim(),
            id: id
        });
    });

    return headings;
}''')
